from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from moments.domain.common.ids import HistoricalServiceId
from moments.domain.table.entities import MomentLog, Table


@dataclass(frozen=True)
class HistoricalService:
    service_id: HistoricalServiceId
    table_number: str
    menu_name: str
    pairing: str | None
    start_time: datetime
    end_time: datetime
    moments_history: tuple[MomentLog, ...]

    def __post_init__(self) -> None:
        if self.end_time < self.start_time:
            raise ValueError("end_time must not precede start_time")

    @property
    def duration_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()


def archive_service(
    table: Table,
    service_id: HistoricalServiceId,
    now: datetime,
) -> HistoricalService | None:
    if table.start_time is None:
        return None
    return HistoricalService(
        service_id=service_id,
        table_number=table.number,
        menu_name=table.menu or "",
        pairing=table.pairing,
        start_time=table.start_time,
        # a clock stepping backwards must not block the close-out
        end_time=max(now, table.start_time),
        moments_history=tuple(table.moments_history),
    )
