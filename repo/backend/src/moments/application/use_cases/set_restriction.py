from __future__ import annotations

from moments.application.dto.responses import TableResponse
from moments.application.mappers.table_mapper import to_table_response
from moments.application.ports.repositories import ServiceStore
from moments.application.sync.broadcaster import SyncBroadcaster
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.errors import InvalidRestrictionError
from moments.application.use_cases.lookup import require_table
from moments.domain.common.ids import TableId
from moments.domain.table.entities import RestrictionType


def parse_restriction_type(value: str | None) -> RestrictionType | None:
    if value is None or not value.strip():
        return None
    try:
        return RestrictionType(value.strip().lower())
    except ValueError as exc:
        raise InvalidRestrictionError(f"invalid restriction type: {value}") from exc


class SetRestriction:
    def __init__(self, store: ServiceStore, broadcaster: SyncBroadcaster) -> None:
        self._store = store
        self._broadcaster = broadcaster

    def execute(
        self,
        table_id: TableId,
        restriction_type: str | None,
        description: str,
        trace_ctx: TraceContext,
    ) -> TableResponse:
        parsed_type = parse_restriction_type(restriction_type)
        if parsed_type is None and description.strip():
            raise InvalidRestrictionError("a restriction description needs a restriction type")
        with self._store.transaction():
            table = require_table(self._store, table_id)
            updated = table.with_restriction(parsed_type, description)
            self._store.tables.save(updated)
            self._broadcaster.publish_tables(self._store.tables.list(), trace_ctx)
        return to_table_response(updated)
