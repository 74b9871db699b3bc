from __future__ import annotations

from moments.application.metrics.service_lifecycle import record_transition_rejected
from moments.domain.table.entities import TableTransitionError


class TableNotFoundError(Exception):
    pass


class MenuNotFoundError(Exception):
    pass


class UnknownPairingError(Exception):
    pass


class InvalidRestrictionError(Exception):
    pass


class InvalidTableTransitionError(Exception):
    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.details = {"reason": reason}


def rejected(operation: str, exc: TableTransitionError) -> InvalidTableTransitionError:
    record_transition_rejected(operation=operation, reason=exc.reason)
    return InvalidTableTransitionError(str(exc), reason=exc.reason)
