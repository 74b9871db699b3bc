"""Timing projections over moment logs and archived services.

Everything here is a pure function of its arguments: callers pass ``now`` so
live figures can be recomputed on every display tick without touching state.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta

from moments.domain.service.entities import HistoricalService
from moments.domain.table.entities import MomentLog, Table

DELAY_THRESHOLD = timedelta(minutes=8)


@dataclass(frozen=True)
class MenuAverage:
    menu_name: str
    services: int
    average: timedelta


def kitchen_duration(log: MomentLog, now: datetime) -> timedelta | None:
    if log.start_time is None:
        return None
    return (log.ready_time or now) - log.start_time


def floor_transition_duration(log: MomentLog, now: datetime) -> timedelta | None:
    if log.ready_time is None:
        return None
    return (log.finish_time or now) - log.ready_time


def is_delayed(log: MomentLog, now: datetime, threshold: timedelta = DELAY_THRESHOLD) -> bool:
    if log.is_seated_marker or log.ready_time is not None:
        return False
    duration = kitchen_duration(log, now)
    return duration is not None and duration > threshold


def course_logs(history: tuple[MomentLog, ...]) -> list[MomentLog]:
    return [log for log in history if not log.is_seated_marker]


def table_elapsed(table: Table, now: datetime) -> timedelta | None:
    if table.start_time is None:
        return None
    return (table.last_moment_time or now) - table.start_time


def menu_averages(services: list[HistoricalService]) -> list[MenuAverage]:
    durations: dict[str, list[timedelta]] = defaultdict(list)
    for service in services:
        durations[service.menu_name].append(service.end_time - service.start_time)

    return [
        MenuAverage(
            menu_name=menu_name,
            services=len(values),
            average=sum(values, timedelta()) / len(values),
        )
        for menu_name, values in sorted(durations.items())
    ]
