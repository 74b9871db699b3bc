from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from moments.application.mappers.event_envelope import (
    HISTORY_SNAPSHOT,
    MENUS_SNAPSHOT,
    NOTIFICATION_CREATED,
    TABLES_SNAPSHOT,
    serialize_history_snapshot,
    serialize_menus_snapshot,
    serialize_notification_event,
    serialize_tables_snapshot,
    sync_channel,
)
from moments.application.metrics.service_lifecycle import record_sync_publish_failure
from moments.application.ports.publisher import EventPublisher
from moments.application.use_cases.context import TraceContext
from moments.domain.common.clock import utcnow
from moments.domain.menu.entities import Menu
from moments.domain.notification.entities import Notification
from moments.domain.service.entities import HistoricalService
from moments.domain.table.entities import Table

logger = logging.getLogger(__name__)


class SyncBroadcaster:
    """Publishes full collection snapshots and notifications for one session.

    Every publish is best effort: transport failures are logged and counted,
    never raised to the use case that triggered them.
    """

    def __init__(
        self,
        publisher: EventPublisher,
        session_id: str,
        next_revision: Callable[[], int],
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._publisher = publisher
        self._session_id = session_id
        self._next_revision = next_revision
        self._clock = clock

    @property
    def session_id(self) -> str:
        return self._session_id

    def publish_tables(self, tables: list[Table], trace_ctx: TraceContext) -> None:
        message = serialize_tables_snapshot(
            tables=tables,
            occurred_at=self._clock(),
            session_id=self._session_id,
            revision=self._next_revision(),
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        self._publish(TABLES_SNAPSHOT, message)

    def publish_menus(self, menus: list[Menu], trace_ctx: TraceContext) -> None:
        message = serialize_menus_snapshot(
            menus=menus,
            occurred_at=self._clock(),
            session_id=self._session_id,
            revision=self._next_revision(),
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        self._publish(MENUS_SNAPSHOT, message)

    def publish_history(self, services: list[HistoricalService], trace_ctx: TraceContext) -> None:
        message = serialize_history_snapshot(
            services=services,
            occurred_at=self._clock(),
            session_id=self._session_id,
            revision=self._next_revision(),
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        self._publish(HISTORY_SNAPSHOT, message)

    def notify(self, notification: Notification, trace_ctx: TraceContext) -> None:
        message = serialize_notification_event(
            notification=notification,
            occurred_at=self._clock(),
            session_id=self._session_id,
            revision=self._next_revision(),
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        self._publish(NOTIFICATION_CREATED, message)

    def snapshot_messages(
        self,
        tables: list[Table],
        menus: list[Menu],
        services: list[HistoricalService],
        trace_ctx: TraceContext,
    ) -> list[str]:
        """Serialize the current collections for a view that just connected."""
        occurred_at = self._clock()
        common = {
            "occurred_at": occurred_at,
            "session_id": self._session_id,
            "trace_id": trace_ctx.trace_id,
            "request_id": trace_ctx.request_id,
        }
        return [
            serialize_tables_snapshot(tables=tables, revision=self._next_revision(), **common),
            serialize_menus_snapshot(menus=menus, revision=self._next_revision(), **common),
            serialize_history_snapshot(
                services=services, revision=self._next_revision(), **common
            ),
        ]

    def _publish(self, event_type: str, message: str) -> None:
        try:
            self._publisher.publish(channel=sync_channel(self._session_id), message=message)
        except Exception:
            record_sync_publish_failure(event_type)
            logger.warning(
                "sync_publish_failed",
                exc_info=True,
                extra={"session_id": self._session_id, "event_type": event_type},
            )
