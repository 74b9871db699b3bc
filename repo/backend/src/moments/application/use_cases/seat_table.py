from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from moments.application.dto.responses import TableResponse
from moments.application.mappers.table_mapper import to_table_response
from moments.application.metrics.service_lifecycle import record_transition
from moments.application.ports.repositories import ServiceStore
from moments.application.sync.broadcaster import SyncBroadcaster
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.errors import UnknownPairingError, rejected
from moments.application.use_cases.lookup import require_table
from moments.domain.common.clock import utcnow
from moments.domain.common.ids import TableId
from moments.domain.notification.entities import Notification, Role
from moments.domain.table.entities import TableTransitionError

logger = logging.getLogger(__name__)


def seated_notification(number: str, pax: int, language: str | None, menu: str) -> Notification:
    return Notification(
        target_role=Role.KITCHEN,
        title=f"Table {number} seated",
        body=f"{pax} pax, {language or 'no language set'}, {menu}",
    )


class RecordSeated:
    def __init__(
        self,
        store: ServiceStore,
        broadcaster: SyncBroadcaster,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._broadcaster = broadcaster
        self._clock = clock

    def execute(
        self,
        table_id: TableId,
        pax: int,
        language: str | None,
        trace_ctx: TraceContext,
    ) -> TableResponse:
        with self._store.transaction():
            table = require_table(self._store, table_id)
            try:
                updated = table.record_seated(pax=pax, language=language, now=self._clock())
            except TableTransitionError as exc:
                raise rejected("record_seated", exc) from exc

            self._store.tables.save(updated)
            record_transition("record_seated")
            logger.info("table_seated", extra={"table_id": str(table_id), "pax": pax})
            self._broadcaster.publish_tables(self._store.tables.list(), trace_ctx)
            self._broadcaster.notify(
                seated_notification(updated.number, pax, language, updated.menu or ""),
                trace_ctx,
            )
        return to_table_response(updated)


class SelectPairing:
    def __init__(self, store: ServiceStore, broadcaster: SyncBroadcaster) -> None:
        self._store = store
        self._broadcaster = broadcaster

    def execute(self, table_id: TableId, pairing: str, trace_ctx: TraceContext) -> TableResponse:
        with self._store.transaction():
            if pairing not in self._store.pairings:
                raise UnknownPairingError(f"unknown pairing: {pairing}")
            table = require_table(self._store, table_id)
            try:
                updated = table.select_pairing(pairing)
            except TableTransitionError as exc:
                raise rejected("select_pairing", exc) from exc

            self._store.tables.save(updated)
            record_transition("select_pairing")
            self._broadcaster.publish_tables(self._store.tables.list(), trace_ctx)
        return to_table_response(updated)
