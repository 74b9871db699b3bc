from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from moments.application.analytics.service_times import (
    course_logs,
    floor_transition_duration,
    is_delayed,
    kitchen_duration,
    menu_averages,
    table_elapsed,
)
from moments.application.dto.responses import (
    MenuAverageResponse,
    MomentTimingResponse,
    ServiceReportResponse,
    TableTimingResponse,
)
from moments.application.ports.repositories import ServiceStore
from moments.domain.common.clock import utcnow
from moments.domain.table.entities import Table


def _seconds(value: timedelta | None) -> float | None:
    return value.total_seconds() if value is not None else None


def _table_timing(table: Table, now: datetime) -> TableTimingResponse:
    return TableTimingResponse(
        tableId=str(table.table_id),
        number=table.number,
        menu=table.menu,
        elapsedSeconds=_seconds(table_elapsed(table, now)),
        moments=[
            MomentTimingResponse(
                momentNumber=log.moment_number,
                momentName=log.moment_name,
                kitchenSeconds=_seconds(kitchen_duration(log, now)),
                floorSeconds=_seconds(floor_transition_duration(log, now)),
                delayed=is_delayed(log, now),
            )
            for log in course_logs(table.moments_history)
        ],
    )


class GetServiceReport:
    def __init__(self, store: ServiceStore, clock: Callable[[], datetime] = utcnow) -> None:
        self._store = store
        self._clock = clock

    def execute(self) -> ServiceReportResponse:
        with self._store.transaction():
            tables = [table for table in self._store.tables.list() if table.has_started]
            services = self._store.history.list()

        now = self._clock()
        timings = [_table_timing(table, now) for table in tables]
        return ServiceReportResponse(
            generatedAt=now,
            tables=timings,
            menuAverages=[
                MenuAverageResponse(
                    menuName=average.menu_name,
                    services=average.services,
                    averageSeconds=average.average.total_seconds(),
                )
                for average in menu_averages(services)
            ],
            delayedMoments=sum(
                1 for timing in timings for moment in timing.moments if moment.delayed
            ),
        )
