from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from moments.application.dto.responses import TableResponse
from moments.application.mappers.table_mapper import to_table_response
from moments.application.metrics.service_lifecycle import record_kitchen_time, record_transition
from moments.application.ports.repositories import ServiceStore
from moments.application.sync.broadcaster import SyncBroadcaster
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.errors import rejected
from moments.application.use_cases.lookup import require_table
from moments.domain.common.clock import utcnow
from moments.domain.common.ids import TableId
from moments.domain.notification.entities import Notification, Role
from moments.domain.table.entities import Table, TableTransitionError
from moments.domain.table.moments import moment_label

logger = logging.getLogger(__name__)


def moment_ready_notification(table: Table) -> Notification:
    label = moment_label(table.current_moment, table.total_moments)
    return Notification(
        target_role=Role.FLOOR,
        title=f"Table {table.number}",
        body=f"Moment {label} ready: {table.current_course()}",
    )


class MarkMomentReady:
    def __init__(
        self,
        store: ServiceStore,
        broadcaster: SyncBroadcaster,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._broadcaster = broadcaster
        self._clock = clock

    def execute(self, table_id: TableId, trace_ctx: TraceContext) -> TableResponse:
        with self._store.transaction():
            table = require_table(self._store, table_id)
            try:
                updated = table.mark_ready(self._clock())
            except TableTransitionError as exc:
                raise rejected("mark_ready", exc) from exc

            self._store.tables.save(updated)
            record_transition("mark_ready")
            record_kitchen_time(updated.current_log())
            logger.info(
                "moment_ready",
                extra={"table_id": str(table_id), "moment": updated.current_moment},
            )
            self._broadcaster.publish_tables(self._store.tables.list(), trace_ctx)
            self._broadcaster.notify(moment_ready_notification(updated), trace_ctx)
        return to_table_response(updated)
