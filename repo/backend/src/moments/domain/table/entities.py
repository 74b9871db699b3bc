from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from moments.domain.common.ids import TableId
from moments.domain.menu.entities import Menu

SEATED_MOMENT_NUMBER = -1
SEATED_MOMENT_NAME = "Seated"


class TableStatus(str, Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    READY = "ready"
    PAUSED = "paused"


class RestrictionType(str, Enum):
    ALLERGY = "allergy"
    INTOLERANCE = "intolerance"
    PREGNANCY = "pregnancy"
    NONE = "none"


class ServicePhase(str, Enum):
    MENU = "menu"
    SEATING = "seating"
    PAIRING = "pairing"
    SERVICE = "service"


@dataclass(frozen=True)
class Restriction:
    type: RestrictionType | None = None
    description: str = ""

    @property
    def is_pending(self) -> bool:
        return self.type is None and bool(self.description)


@dataclass(frozen=True)
class MomentLog:
    moment_number: int
    moment_name: str
    start_time: datetime | None
    ready_time: datetime | None = None
    finish_time: datetime | None = None

    @property
    def is_seated_marker(self) -> bool:
        return self.moment_number == SEATED_MOMENT_NUMBER


@dataclass(frozen=True)
class Table:
    table_id: TableId
    number: str
    menu: str | None = None
    courses: tuple[str, ...] = ()
    pairing: str | None = None
    pax: int | None = None
    language: str | None = None
    status: TableStatus = TableStatus.IDLE
    current_moment: int = 0
    total_moments: int = 0
    start_time: datetime | None = None
    last_moment_time: datetime | None = None
    moments_history: tuple[MomentLog, ...] = ()
    restriction: Restriction = field(default_factory=Restriction)

    def __post_init__(self) -> None:
        if self.total_moments != len(self.courses):
            raise ValueError("total_moments must equal the number of courses")
        if self.total_moments > 0 and self.menu is None:
            raise ValueError("total_moments can only be set together with a menu")
        if not 0 <= self.current_moment <= self.total_moments:
            raise ValueError("current_moment must be between 0 and total_moments")
        if self.status in (TableStatus.PREPARING, TableStatus.READY) and self.current_moment < 1:
            raise ValueError("preparing/ready tables must have a current moment")
        if self.pax is not None and self.pax < 1:
            raise ValueError("pax must be >= 1")

    @classmethod
    def empty(cls, number: str) -> Table:
        return cls(table_id=table_id_for(number), number=number)

    @property
    def has_started(self) -> bool:
        return self.current_moment > 0

    @property
    def is_seated(self) -> bool:
        return any(log.is_seated_marker for log in self.moments_history)

    @property
    def phase(self) -> ServicePhase:
        return service_phase(self)

    def current_log(self) -> MomentLog | None:
        if not self.has_started:
            return None
        for log in reversed(self.moments_history):
            if log.moment_number == self.current_moment:
                return log
        return None

    def current_course(self) -> str | None:
        if not self.has_started:
            return None
        return self.courses[self.current_moment - 1]

    def select_menu(self, menu: Menu) -> Table:
        if self.has_started:
            raise TableTransitionError(
                "SERVICE_STARTED", f"table {self.number} already started its service"
            )
        if not menu.is_active:
            raise TableTransitionError("MENU_INACTIVE", f"menu {menu.name} is not active")
        # seating details are re-captured after a menu change
        return replace(
            self,
            menu=menu.name,
            courses=tuple(menu.moments),
            total_moments=menu.moment_count,
            current_moment=0,
            status=TableStatus.IDLE,
            moments_history=(),
            pairing=None,
            pax=None,
            language=None,
        )

    def record_seated(self, pax: int, language: str | None, now: datetime) -> Table:
        if self.menu is None:
            raise TableTransitionError("NO_MENU", f"table {self.number} has no menu")
        if self.has_started or self.pairing is not None:
            raise TableTransitionError(
                "SERVICE_STARTED", f"table {self.number} is past the seating step"
            )
        if self.is_seated:
            raise TableTransitionError("ALREADY_SEATED", f"table {self.number} is already seated")
        if pax < 1:
            raise TableTransitionError("INVALID_PAX", "pax must be >= 1")
        seated = MomentLog(
            moment_number=SEATED_MOMENT_NUMBER,
            moment_name=SEATED_MOMENT_NAME,
            start_time=now,
            ready_time=now,
            finish_time=now,
        )
        return replace(
            self,
            pax=pax,
            language=language,
            moments_history=(*self.moments_history, seated),
        )

    def select_pairing(self, pairing: str) -> Table:
        if not self.is_seated:
            raise TableTransitionError("NOT_SEATED", f"table {self.number} is not seated yet")
        return replace(self, pairing=pairing)

    def next_moment_exceeds_menu(self) -> bool:
        return self.current_moment + 1 > self.total_moments

    def stamp_current_finished(self, now: datetime) -> Table:
        history = list(self.moments_history)
        for index in range(len(history) - 1, -1, -1):
            log = history[index]
            if log.moment_number == self.current_moment:
                if log.finish_time is None:
                    history[index] = replace(log, finish_time=now)
                break
        return replace(self, moments_history=tuple(history))

    def ensure_can_advance(self) -> None:
        if self.status == TableStatus.PREPARING:
            raise TableTransitionError(
                "KITCHEN_PREPARING", f"kitchen is still preparing table {self.number}"
            )
        if self.status == TableStatus.PAUSED:
            raise TableTransitionError("TABLE_PAUSED", f"table {self.number} is paused")
        if self.menu is None:
            raise TableTransitionError("NO_MENU", f"table {self.number} has no menu")

    def advance(self, now: datetime) -> Table:
        """Start the next moment.

        Callers route the table through service completion instead when
        ``next_moment_exceeds_menu`` is true.
        """
        self.ensure_can_advance()
        if self.next_moment_exceeds_menu():
            raise TableTransitionError(
                "SERVICE_COMPLETE", f"table {self.number} has no moments left"
            )
        stamped = self.stamp_current_finished(now) if self.has_started else self
        next_moment = self.current_moment + 1
        log = MomentLog(
            moment_number=next_moment,
            moment_name=self.courses[next_moment - 1],
            start_time=now,
        )
        return replace(
            stamped,
            current_moment=next_moment,
            status=TableStatus.PREPARING,
            last_moment_time=now,
            start_time=now if self.current_moment == 0 else self.start_time,
            moments_history=(*stamped.moments_history, log),
        )

    def mark_ready(self, now: datetime) -> Table:
        if self.status != TableStatus.PREPARING:
            raise TableTransitionError(
                "NOT_PREPARING",
                f"table {self.number} cannot be marked ready from status={self.status.value}",
            )
        history = list(self.moments_history)
        for index in range(len(history) - 1, -1, -1):
            if history[index].moment_number == self.current_moment:
                history[index] = replace(history[index], ready_time=now)
                break
        return replace(self, status=TableStatus.READY, moments_history=tuple(history))

    def pause(self) -> Table:
        """Hold the table. Resuming returns to idle, so a ready moment loses its ready flag."""
        if self.status == TableStatus.PREPARING:
            raise TableTransitionError(
                "KITCHEN_PREPARING", f"table {self.number} cannot pause while the kitchen works"
            )
        if self.status == TableStatus.PAUSED:
            raise TableTransitionError("TABLE_PAUSED", f"table {self.number} is already paused")
        return replace(self, status=TableStatus.PAUSED)

    def resume(self) -> Table:
        if self.status != TableStatus.PAUSED:
            raise TableTransitionError("NOT_PAUSED", f"table {self.number} is not paused")
        return replace(self, status=TableStatus.IDLE)

    def with_restriction(self, restriction_type: RestrictionType | None, description: str) -> Table:
        return replace(
            self,
            restriction=Restriction(type=restriction_type, description=description.strip()),
        )

    def reset(self) -> Table:
        return Table.empty(self.number)


def table_id_for(number: str) -> TableId:
    return TableId(f"t-{number}")


def service_phase(table: Table) -> ServicePhase:
    if table.menu is None:
        return ServicePhase.MENU
    if table.has_started:
        return ServicePhase.SERVICE
    if not table.is_seated:
        return ServicePhase.SEATING
    if table.pairing is None:
        return ServicePhase.PAIRING
    return ServicePhase.SERVICE


class TableTransitionError(Exception):
    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
