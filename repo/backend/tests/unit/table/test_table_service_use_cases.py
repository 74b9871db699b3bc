from __future__ import annotations

import json
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from moments.application.sync.broadcaster import SyncBroadcaster
from moments.application.use_cases.advance_moment import AdvanceMoment
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.errors import (
    InvalidRestrictionError,
    InvalidTableTransitionError,
    MenuNotFoundError,
    TableNotFoundError,
    UnknownPairingError,
)
from moments.application.use_cases.finish_service import FinishService
from moments.application.use_cases.list_tables import GetKitchenBoard, GetTable
from moments.application.use_cases.mark_moment_ready import MarkMomentReady
from moments.application.use_cases.pause_table import PauseTable, ResumeTable
from moments.application.use_cases.seat_table import RecordSeated, SelectPairing
from moments.application.use_cases.select_menu import SelectMenu
from moments.application.use_cases.set_restriction import SetRestriction
from moments.domain.common.ids import MenuId, TableId
from moments.infrastructure.bootstrap.seed import build_store

TRACE = TraceContext(trace_id="trace-1", request_id="req-1")
TABLE = TableId("t-10")


class FakePublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        self.messages.append((channel, message))

    def envelopes(self) -> list[dict]:
        return [json.loads(message) for _, message in self.messages]

    def event_types(self) -> list[str]:
        return [envelope["event_type"] for envelope in self.envelopes()]


class FailingPublisher:
    def publish(self, channel: str, message: str) -> None:
        raise ConnectionError("redis unavailable")


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 3, 1, 20, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def tick(self, minutes: float) -> None:
        self.now += timedelta(minutes=minutes)


class Service:
    def __init__(self, publisher=None) -> None:
        self.store = build_store(table_numbers=("10", "11"))
        self.publisher = publisher if publisher is not None else FakePublisher()
        self.clock = FakeClock()
        self.broadcaster = SyncBroadcaster(
            publisher=self.publisher,
            session_id="s1",
            next_revision=self.store.next_revision,
            clock=self.clock,
        )

    def select_menu(self, menu_id: str = "m1"):
        return SelectMenu(self.store, self.broadcaster).execute(TABLE, MenuId(menu_id), TRACE)

    def seat(self, pax: int = 2, language: str | None = "pt"):
        return RecordSeated(self.store, self.broadcaster, clock=self.clock).execute(
            TABLE, pax=pax, language=language, trace_ctx=TRACE
        )

    def pair(self, pairing: str = "Essencial"):
        return SelectPairing(self.store, self.broadcaster).execute(TABLE, pairing, TRACE)

    def advance(self):
        return AdvanceMoment(self.store, self.broadcaster, clock=self.clock).execute(TABLE, TRACE)

    def ready(self):
        return MarkMomentReady(self.store, self.broadcaster, clock=self.clock).execute(TABLE, TRACE)

    def finish(self):
        return FinishService(self.store, self.broadcaster, clock=self.clock).execute(TABLE, TRACE)


def test_full_service_on_nine_moment_menu() -> None:
    service = Service()
    service.select_menu("m1")
    service.seat(pax=2)
    service.pair("Essencial")

    labels = []
    for _ in range(7):
        service.clock.tick(1)
        started = service.advance()
        labels.append(started.currentLabel)
        assert started.status == "preparing"
        service.clock.tick(5)
        ready = service.ready()
        assert ready.status == "ready"

    assert labels == ["1&2", "3", "4", "5", "6", "7", "8&9"]
    assert started.currentCourse == "Bolo de milho & rosquilha de chocolate"

    service.clock.tick(2)
    finished = service.advance()

    assert finished.menu is None
    assert finished.currentMoment == 0
    assert finished.status == "idle"
    assert finished.momentsHistory == []

    archived = service.store.history.list()
    assert len(archived) == 1
    record = archived[0]
    assert record.table_number == "10"
    assert record.menu_name == "Menu 9 momentos"
    assert record.pairing == "Essencial"
    assert record.end_time == service.clock.now
    assert [log.moment_number for log in record.moments_history] == [-1, 1, 2, 3, 4, 5, 6, 7]
    assert all(log.finish_time is not None for log in record.moments_history)
    assert record.moments_history[-1].finish_time == service.clock.now


def test_advance_publishes_snapshot_then_kitchen_notification() -> None:
    service = Service()
    service.select_menu()
    service.publisher.messages.clear()

    service.advance()

    envelopes = service.publisher.envelopes()
    assert [envelope["event_type"] for envelope in envelopes] == [
        "tables.snapshot",
        "notification.created",
    ]
    assert all(channel == "sync:s1" for channel, _ in service.publisher.messages)
    assert envelopes[0]["revision"] < envelopes[1]["revision"]
    assert envelopes[0]["trace_id"] == "trace-1"
    assert envelopes[0]["request_id"] == "req-1"
    assert len(envelopes[0]["payload"]["tables"]) == 2
    notification = envelopes[1]["payload"]
    assert notification["targetRole"] == "kitchen"
    assert "1&2" in notification["body"]


def test_mark_ready_notifies_floor_and_second_call_is_rejected() -> None:
    service = Service()
    service.select_menu()
    service.advance()
    service.publisher.messages.clear()

    service.ready()

    envelopes = service.publisher.envelopes()
    assert envelopes[-1]["event_type"] == "notification.created"
    assert envelopes[-1]["payload"]["targetRole"] == "floor"

    service.publisher.messages.clear()
    with pytest.raises(InvalidTableTransitionError) as excinfo:
        service.ready()
    assert excinfo.value.reason == "NOT_PREPARING"
    assert service.publisher.messages == []


def test_rejected_advance_leaves_state_untouched() -> None:
    service = Service()
    service.select_menu()
    service.advance()
    before = service.store.tables.get(TABLE)

    with pytest.raises(InvalidTableTransitionError) as excinfo:
        service.advance()

    assert excinfo.value.reason == "KITCHEN_PREPARING"
    assert excinfo.value.details == {"reason": "KITCHEN_PREPARING"}
    assert service.store.tables.get(TABLE) == before


def test_advance_without_menu_is_rejected() -> None:
    service = Service()

    with pytest.raises(InvalidTableTransitionError) as excinfo:
        service.advance()
    assert excinfo.value.reason == "NO_MENU"


def test_seating_notifies_kitchen_and_pairing_is_validated() -> None:
    service = Service()
    service.select_menu()
    service.publisher.messages.clear()

    seated = service.seat(pax=4, language="en")

    assert seated.pax == 4
    assert seated.phase == "pairing"
    assert seated.momentsHistory[0].label == "Seated"
    notification = service.publisher.envelopes()[-1]["payload"]
    assert notification["targetRole"] == "kitchen"
    assert "4 pax" in notification["body"]
    assert notification["body"].isascii()

    with pytest.raises(UnknownPairingError):
        service.pair("Champagne")
    assert service.pair("Sem Pairing").phase == "service"


def test_pause_while_ready_then_resume() -> None:
    service = Service()
    service.select_menu()
    service.advance()

    with pytest.raises(InvalidTableTransitionError):
        PauseTable(service.store, service.broadcaster).execute(TABLE, TRACE)

    service.ready()
    paused = PauseTable(service.store, service.broadcaster).execute(TABLE, TRACE)
    assert paused.status == "paused"

    with pytest.raises(InvalidTableTransitionError) as excinfo:
        service.advance()
    assert excinfo.value.reason == "TABLE_PAUSED"

    resumed = ResumeTable(service.store, service.broadcaster).execute(TABLE, TRACE)
    assert resumed.status == "idle"
    assert service.advance().currentMoment == 2


def test_finish_without_service_resets_without_archiving() -> None:
    service = Service()
    service.select_menu()
    service.publisher.messages.clear()

    reset = service.finish()

    assert reset.menu is None
    assert service.store.history.list() == []
    assert service.publisher.event_types() == ["tables.snapshot"]


def test_finish_twice_archives_once() -> None:
    service = Service()
    service.select_menu()
    service.advance()
    service.clock.tick(10)

    service.finish()
    service.finish()

    assert len(service.store.history.list()) == 1
    assert service.store.history.list()[0].moments_history[-1].finish_time is None


def test_finish_after_clock_steps_back_still_archives() -> None:
    service = Service()
    service.select_menu()
    service.advance()
    started_at = service.store.tables.get(TABLE).start_time
    service.clock.now -= timedelta(seconds=30)

    reset = service.finish()

    assert reset.menu is None
    archived = service.store.history.list()
    assert len(archived) == 1
    assert archived[0].end_time == started_at


def test_final_advance_after_clock_steps_back_still_archives() -> None:
    service = Service()
    service.select_menu("m1")
    for _ in range(7):
        service.advance()
        service.ready()
    service.clock.now -= timedelta(minutes=5)

    finished = service.advance()

    assert finished.status == "idle"
    record = service.store.history.list()[0]
    assert record.end_time >= record.start_time

def test_finish_publishes_history_snapshot_when_archived() -> None:
    service = Service()
    service.select_menu()
    service.advance()
    service.publisher.messages.clear()

    service.finish()

    assert service.publisher.event_types() == ["tables.snapshot", "history.snapshot"]
    services = service.publisher.envelopes()[-1]["payload"]["services"]
    assert services[0]["menuName"] == "Menu 9 momentos"


def test_restriction_updates_only_restriction() -> None:
    service = Service()
    service.select_menu()
    service.advance()

    updated = SetRestriction(service.store, service.broadcaster).execute(
        TABLE, restriction_type="Allergy", description="peanuts", trace_ctx=TRACE
    )

    assert updated.restriction.type == "allergy"
    assert updated.restriction.description == "peanuts"
    assert updated.status == "preparing"

    with pytest.raises(InvalidRestrictionError):
        SetRestriction(service.store, service.broadcaster).execute(
            TABLE, restriction_type="vegan", description="", trace_ctx=TRACE
        )


def test_restriction_description_requires_a_type() -> None:
    service = Service()
    set_restriction = SetRestriction(service.store, service.broadcaster)
    set_restriction.execute(TABLE, restriction_type="allergy", description="shellfish", trace_ctx=TRACE)
    service.publisher.messages.clear()

    with pytest.raises(InvalidRestrictionError):
        set_restriction.execute(TABLE, restriction_type=None, description="nuts", trace_ctx=TRACE)
    with pytest.raises(InvalidRestrictionError):
        set_restriction.execute(TABLE, restriction_type="", description="nuts", trace_ctx=TRACE)

    kept = service.store.tables.get(TABLE).restriction
    assert kept.type is not None and kept.type.value == "allergy"
    assert kept.description == "shellfish"
    assert service.publisher.messages == []

    cleared = set_restriction.execute(TABLE, restriction_type=None, description="  ", trace_ctx=TRACE)
    assert cleared.restriction.type is None
    assert cleared.restriction.description == ""


def test_unknown_ids_raise_not_found() -> None:
    service = Service()

    with pytest.raises(TableNotFoundError):
        GetTable(service.store).execute(TableId("t-999"))
    with pytest.raises(MenuNotFoundError):
        service.select_menu("m-missing")


def test_publish_failure_never_reaches_the_caller() -> None:
    service = Service(publisher=FailingPublisher())
    service.select_menu()

    started = service.advance()

    assert started.currentMoment == 1
    assert service.store.tables.get(TABLE).current_moment == 1


def test_kitchen_board_lists_tables_with_menu() -> None:
    service = Service()
    service.select_menu()
    service.advance()

    board = GetKitchenBoard(service.store).execute()

    assert [ticket.number for ticket in board.tickets] == ["10"]
    ticket = board.tickets[0]
    assert ticket.currentLabel == "1&2"
    assert ticket.currentCourse == "Crocante de sementes & coalhada"
    assert ticket.preparingSince == service.clock.now
