from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from moments.application.mappers.event_envelope import serialize_tables_snapshot
from moments.application.notifications.dispatcher import NotificationDispatcher
from moments.application.sync.broadcaster import SyncBroadcaster
from moments.application.sync.device_view import DeviceView
from moments.application.use_cases.advance_moment import AdvanceMoment
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.mark_moment_ready import MarkMomentReady
from moments.application.use_cases.select_menu import SelectMenu
from moments.domain.common.ids import MenuId, TableId
from moments.domain.notification.entities import Role
from moments.domain.table.entities import Table
from moments.infrastructure.bootstrap.seed import build_store
from moments.infrastructure.messaging.local_bus import LocalSyncBus

TRACE = TraceContext(trace_id=None, request_id=None)
TABLE = TableId("t-10")


class RecordingNotifier:
    def __init__(self) -> None:
        self.shown: list[tuple[str, str]] = []

    def request_permission(self) -> bool:
        return True

    def notify(self, title: str, body: str, tag: str) -> None:
        self.shown.append((title, body))


class RecordingAudio:
    def __init__(self) -> None:
        self.plays = 0

    def play(self, cue) -> None:
        self.plays += 1


def _view(bus: LocalSyncBus, role: Role, session_id: str = "s1"):
    notifier, audio = RecordingNotifier(), RecordingAudio()
    view = DeviceView(
        session_id=session_id,
        dispatcher=NotificationDispatcher(audio=audio, notifier=notifier),
    )
    view.login(role)
    view.attach(bus)
    return view, notifier, audio


def _session():
    store = build_store(table_numbers=("10", "11"))
    bus = LocalSyncBus()
    broadcaster = SyncBroadcaster(publisher=bus, session_id="s1", next_revision=store.next_revision)
    return store, bus, broadcaster


def test_ready_alert_reaches_floor_view_only() -> None:
    store, bus, broadcaster = _session()
    floor, floor_notifier, floor_audio = _view(bus, Role.FLOOR)
    kitchen, kitchen_notifier, _ = _view(bus, Role.KITCHEN)

    SelectMenu(store, broadcaster).execute(TABLE, MenuId("m1"), TRACE)
    AdvanceMoment(store, broadcaster).execute(TABLE, TRACE)
    kitchen_alerts_after_advance = len(kitchen_notifier.shown)
    floor_notifier.shown.clear()

    MarkMomentReady(store, broadcaster).execute(TABLE, TRACE)

    assert len(floor_notifier.shown) == 1
    assert floor_audio.plays == 1
    assert len(kitchen_notifier.shown) == kitchen_alerts_after_advance
    assert floor.table("10").status == "ready"
    assert kitchen.table("10").status == "ready"


def test_views_converge_on_authoritative_state() -> None:
    store, bus, broadcaster = _session()
    floor, _, _ = _view(bus, Role.FLOOR)
    kitchen, _, _ = _view(bus, Role.KITCHEN)

    SelectMenu(store, broadcaster).execute(TABLE, MenuId("m2"), TRACE)
    AdvanceMoment(store, broadcaster).execute(TABLE, TRACE)

    assert floor.tables == kitchen.tables
    assert floor.table("10").currentMoment == 1
    assert floor.table("10").totalMoments == 9


def test_stale_snapshot_is_dropped() -> None:
    view = DeviceView(session_id="s1")
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)
    fresh = serialize_tables_snapshot(
        tables=[Table.empty("10"), Table.empty("11")],
        occurred_at=now,
        session_id="s1",
        revision=5,
        trace_id=None,
        request_id=None,
    )
    stale = serialize_tables_snapshot(
        tables=[Table.empty("10")],
        occurred_at=now,
        session_id="s1",
        revision=4,
        trace_id=None,
        request_id=None,
    )

    view.handle_message(fresh)
    view.handle_message(stale)

    assert [table.number for table in view.tables] == ["10", "11"]


def test_other_sessions_and_garbage_are_ignored() -> None:
    view = DeviceView(session_id="s1")
    foreign = serialize_tables_snapshot(
        tables=[Table.empty("99")],
        occurred_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
        session_id="s2",
        revision=1,
        trace_id=None,
        request_id=None,
    )

    view.handle_message(foreign)
    view.handle_message("not json")

    assert view.tables == []


def test_logout_stops_alerts_and_mute_is_per_view() -> None:
    store, bus, broadcaster = _session()
    floor, floor_notifier, floor_audio = _view(bus, Role.FLOOR)
    second_floor, _, second_audio = _view(bus, Role.FLOOR)
    second_floor.set_sound_enabled(False)

    SelectMenu(store, broadcaster).execute(TABLE, MenuId("m1"), TRACE)
    AdvanceMoment(store, broadcaster).execute(TABLE, TRACE)
    MarkMomentReady(store, broadcaster).execute(TABLE, TRACE)

    assert floor_audio.plays == 1
    assert second_audio.plays == 0

    floor.logout()
    AdvanceMoment(store, broadcaster).execute(TABLE, TRACE)
    MarkMomentReady(store, broadcaster).execute(TABLE, TRACE)

    assert floor_audio.plays == 1
    assert len(floor_notifier.shown) == 1
    assert floor.role is None
