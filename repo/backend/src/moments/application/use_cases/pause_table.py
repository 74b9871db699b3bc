from __future__ import annotations

from moments.application.dto.responses import TableResponse
from moments.application.mappers.table_mapper import to_table_response
from moments.application.metrics.service_lifecycle import record_transition
from moments.application.ports.repositories import ServiceStore
from moments.application.sync.broadcaster import SyncBroadcaster
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.errors import rejected
from moments.application.use_cases.lookup import require_table
from moments.domain.common.ids import TableId
from moments.domain.table.entities import TableTransitionError


class PauseTable:
    def __init__(self, store: ServiceStore, broadcaster: SyncBroadcaster) -> None:
        self._store = store
        self._broadcaster = broadcaster

    def execute(self, table_id: TableId, trace_ctx: TraceContext) -> TableResponse:
        with self._store.transaction():
            table = require_table(self._store, table_id)
            try:
                updated = table.pause()
            except TableTransitionError as exc:
                raise rejected("pause", exc) from exc

            self._store.tables.save(updated)
            record_transition("pause")
            self._broadcaster.publish_tables(self._store.tables.list(), trace_ctx)
        return to_table_response(updated)


class ResumeTable:
    def __init__(self, store: ServiceStore, broadcaster: SyncBroadcaster) -> None:
        self._store = store
        self._broadcaster = broadcaster

    def execute(self, table_id: TableId, trace_ctx: TraceContext) -> TableResponse:
        with self._store.transaction():
            table = require_table(self._store, table_id)
            try:
                updated = table.resume()
            except TableTransitionError as exc:
                raise rejected("resume", exc) from exc

            self._store.tables.save(updated)
            record_transition("resume")
            self._broadcaster.publish_tables(self._store.tables.list(), trace_ctx)
        return to_table_response(updated)
