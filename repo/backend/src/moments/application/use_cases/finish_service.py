from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from moments.application.dto.responses import TableResponse
from moments.application.mappers.table_mapper import to_table_response
from moments.application.metrics.service_lifecycle import record_service_finished
from moments.application.ports.repositories import ServiceStore
from moments.application.sync.broadcaster import SyncBroadcaster
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.lookup import require_table
from moments.domain.common.clock import utcnow
from moments.domain.common.ids import HistoricalServiceId, TableId
from moments.domain.service.entities import archive_service
from moments.domain.table.entities import Table

logger = logging.getLogger(__name__)


def new_service_id() -> HistoricalServiceId:
    return HistoricalServiceId(f"hist-{uuid4().hex}")


def close_out_table(
    store: ServiceStore,
    broadcaster: SyncBroadcaster,
    table: Table,
    now: datetime,
    trace_ctx: TraceContext,
) -> Table:
    """Archive a started service and recycle the table.

    Must be called inside ``store.transaction()``.
    """
    archived = archive_service(table, service_id=new_service_id(), now=now)
    if archived is not None:
        store.history.add(archived)

    reset = table.reset()
    store.tables.save(reset)
    record_service_finished(
        archived=archived is not None,
        menu=table.menu,
        duration_seconds=archived.duration_seconds if archived is not None else None,
    )
    logger.info(
        "service_finished",
        extra={
            "table_id": str(table.table_id),
            "archived": archived is not None,
            "moments_served": table.current_moment,
        },
    )

    broadcaster.publish_tables(store.tables.list(), trace_ctx)
    if archived is not None:
        broadcaster.publish_history(store.history.list(), trace_ctx)
    return reset


class FinishService:
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
            reset = close_out_table(
                self._store,
                self._broadcaster,
                table,
                now=self._clock(),
                trace_ctx=trace_ctx,
            )
        return to_table_response(reset)
