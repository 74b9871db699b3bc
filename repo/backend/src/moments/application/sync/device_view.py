from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

from pydantic import ValidationError

from moments.application.dto.responses import (
    HistoricalServiceResponse,
    MenuResponse,
    NotificationResponse,
    TableResponse,
)
from moments.application.mappers.event_envelope import (
    HISTORY_SNAPSHOT,
    MENUS_SNAPSHOT,
    NOTIFICATION_CREATED,
    SNAPSHOT_EVENT_TYPES,
    TABLES_SNAPSHOT,
    SyncEnvelope,
    parse_envelope,
    sync_channel,
)
from moments.application.notifications.dispatcher import NotificationDispatcher
from moments.domain.notification.entities import Notification, Role

logger = logging.getLogger(__name__)


class SyncSubscriber(Protocol):
    def subscribe(self, channel: str, handler: Callable[[str], None]) -> Callable[[], None]: ...


class DeviceView:
    """A local replica of one session's state, as seen by one logged-in role.

    Incoming snapshots replace the held collection wholesale; a snapshot
    whose revision is not newer than the last one applied for that topic is
    dropped, so a late stale delivery never overwrites fresher state.
    """

    def __init__(self, session_id: str, dispatcher: NotificationDispatcher | None = None) -> None:
        self.session_id = session_id
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.tables: list[TableResponse] = []
        self.menus: list[MenuResponse] = []
        self.history: list[HistoricalServiceResponse] = []
        self._revisions: dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def role(self) -> Role | None:
        return self.dispatcher.role

    def login(self, role: Role) -> None:
        self.dispatcher.role = role
        if role.receives_alerts:
            self.dispatcher.request_permission()

    def logout(self) -> None:
        self.dispatcher.role = None

    def set_sound_enabled(self, enabled: bool) -> None:
        self.dispatcher.settings.sound_enabled = enabled

    def attach(self, bus: SyncSubscriber) -> Callable[[], None]:
        return bus.subscribe(sync_channel(self.session_id), self.handle_message)

    def table(self, number: str) -> TableResponse | None:
        for table in self.tables:
            if table.number == number:
                return table
        return None

    def active_menus(self) -> list[MenuResponse]:
        return [menu for menu in self.menus if menu.isActive]

    def handle_message(self, message: str) -> None:
        try:
            envelope = parse_envelope(message)
        except ValidationError:
            logger.warning("sync_message_invalid", extra={"session_id": self.session_id})
            return
        if envelope.session_id != self.session_id:
            return

        if envelope.event_type == NOTIFICATION_CREATED:
            self._handle_notification(envelope)
            return
        if envelope.event_type not in SNAPSHOT_EVENT_TYPES:
            return

        with self._lock:
            last_revision = self._revisions.get(envelope.event_type)
            if last_revision is not None and envelope.revision <= last_revision:
                logger.debug(
                    "sync_snapshot_stale",
                    extra={"event_type": envelope.event_type, "revision": envelope.revision},
                )
                return
            if not self._apply_snapshot(envelope):
                return
            self._revisions[envelope.event_type] = envelope.revision

    def _apply_snapshot(self, envelope: SyncEnvelope) -> bool:
        payload = envelope.payload
        try:
            if envelope.event_type == TABLES_SNAPSHOT:
                self.tables = [TableResponse.model_validate(item) for item in payload["tables"]]
            elif envelope.event_type == MENUS_SNAPSHOT:
                self.menus = [MenuResponse.model_validate(item) for item in payload["menus"]]
            elif envelope.event_type == HISTORY_SNAPSHOT:
                self.history = [
                    HistoricalServiceResponse.model_validate(item) for item in payload["services"]
                ]
        except (KeyError, ValidationError):
            logger.warning("sync_snapshot_invalid", extra={"event_type": envelope.event_type})
            return False
        return True

    def _handle_notification(self, envelope: SyncEnvelope) -> None:
        try:
            payload = NotificationResponse.model_validate(envelope.payload)
            notification = Notification(
                target_role=Role(payload.targetRole),
                title=payload.title,
                body=payload.body,
            )
        except ValueError:
            logger.warning("sync_notification_invalid", extra={"session_id": self.session_id})
            return
        self.dispatcher.dispatch(notification)
