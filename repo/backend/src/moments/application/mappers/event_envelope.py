from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from moments.application.dto.responses import NotificationResponse
from moments.application.mappers.history_mapper import to_historical_service_response
from moments.application.mappers.menu_mapper import to_menu_response
from moments.application.mappers.table_mapper import to_table_response
from moments.domain.menu.entities import Menu
from moments.domain.notification.entities import Notification
from moments.domain.service.entities import HistoricalService
from moments.domain.table.entities import Table

TABLES_SNAPSHOT = "tables.snapshot"
MENUS_SNAPSHOT = "menus.snapshot"
HISTORY_SNAPSHOT = "history.snapshot"
NOTIFICATION_CREATED = "notification.created"

SNAPSHOT_EVENT_TYPES = frozenset({TABLES_SNAPSHOT, MENUS_SNAPSHOT, HISTORY_SNAPSHOT})


class SyncEnvelope(BaseModel):
    event_id: str
    event_type: str
    occurred_at: datetime
    request_id: str | None = None
    trace_id: str | None = None
    session_id: str
    revision: int
    payload: dict[str, Any] = Field(default_factory=dict)


def sync_channel(session_id: str) -> str:
    return f"sync:{session_id}"


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    session_id: str,
    revision: int,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "session_id": session_id,
        "revision": revision,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def serialize_tables_snapshot(
    *,
    tables: list[Table],
    occurred_at: datetime,
    session_id: str,
    revision: int,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type=TABLES_SNAPSHOT,
        occurred_at=occurred_at,
        session_id=session_id,
        revision=revision,
        trace_id=trace_id,
        request_id=request_id,
        payload={"tables": [to_table_response(table).model_dump(mode="json") for table in tables]},
    )


def serialize_menus_snapshot(
    *,
    menus: list[Menu],
    occurred_at: datetime,
    session_id: str,
    revision: int,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type=MENUS_SNAPSHOT,
        occurred_at=occurred_at,
        session_id=session_id,
        revision=revision,
        trace_id=trace_id,
        request_id=request_id,
        payload={"menus": [to_menu_response(menu).model_dump(mode="json") for menu in menus]},
    )


def serialize_history_snapshot(
    *,
    services: list[HistoricalService],
    occurred_at: datetime,
    session_id: str,
    revision: int,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type=HISTORY_SNAPSHOT,
        occurred_at=occurred_at,
        session_id=session_id,
        revision=revision,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "services": [
                to_historical_service_response(service).model_dump(mode="json")
                for service in services
            ]
        },
    )


def serialize_notification_event(
    *,
    notification: Notification,
    occurred_at: datetime,
    session_id: str,
    revision: int,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type=NOTIFICATION_CREATED,
        occurred_at=occurred_at,
        session_id=session_id,
        revision=revision,
        trace_id=trace_id,
        request_id=request_id,
        payload=NotificationResponse(
            targetRole=notification.target_role.value,
            title=notification.title,
            body=notification.body,
        ).model_dump(mode="json"),
    )


def parse_envelope(message: str) -> SyncEnvelope:
    return SyncEnvelope.model_validate_json(message)
