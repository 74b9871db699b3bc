from __future__ import annotations

import logging

from moments.application.dto.responses import TableResponse
from moments.application.mappers.table_mapper import to_table_response
from moments.application.metrics.service_lifecycle import record_transition
from moments.application.ports.repositories import ServiceStore
from moments.application.sync.broadcaster import SyncBroadcaster
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.errors import rejected
from moments.application.use_cases.lookup import require_menu, require_table
from moments.domain.common.ids import MenuId, TableId
from moments.domain.table.entities import TableTransitionError

logger = logging.getLogger(__name__)


class SelectMenu:
    def __init__(self, store: ServiceStore, broadcaster: SyncBroadcaster) -> None:
        self._store = store
        self._broadcaster = broadcaster

    def execute(self, table_id: TableId, menu_id: MenuId, trace_ctx: TraceContext) -> TableResponse:
        with self._store.transaction():
            table = require_table(self._store, table_id)
            menu = require_menu(self._store, menu_id)
            try:
                updated = table.select_menu(menu)
            except TableTransitionError as exc:
                raise rejected("select_menu", exc) from exc

            self._store.tables.save(updated)
            record_transition("select_menu")
            logger.info(
                "menu_selected",
                extra={"table_id": str(table_id), "menu_id": str(menu_id)},
            )
            self._broadcaster.publish_tables(self._store.tables.list(), trace_ctx)
        return to_table_response(updated)
