from __future__ import annotations

from moments.application.dto.responses import (
    KitchenTicketResponse,
    MomentLogResponse,
    RestrictionResponse,
    TableResponse,
)
from moments.domain.table.entities import MomentLog, Restriction, Table
from moments.domain.table.moments import moment_label, served_moment_count


def _label_for(log: MomentLog, total_moments: int) -> str | None:
    try:
        return moment_label(log.moment_number, total_moments)
    except ValueError:
        return None


def to_moment_log_response(log: MomentLog, total_moments: int) -> MomentLogResponse:
    return MomentLogResponse(
        momentNumber=log.moment_number,
        momentName=log.moment_name,
        label=_label_for(log, total_moments),
        startTime=log.start_time,
        readyTime=log.ready_time,
        finishTime=log.finish_time,
    )


def to_restriction_response(restriction: Restriction) -> RestrictionResponse:
    return RestrictionResponse(
        type=restriction.type.value if restriction.type is not None else None,
        description=restriction.description,
    )


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        tableId=str(table.table_id),
        number=table.number,
        menu=table.menu,
        courses=list(table.courses),
        pairing=table.pairing,
        pax=table.pax,
        language=table.language,
        status=table.status.value,
        phase=table.phase.value,
        currentMoment=table.current_moment,
        totalMoments=table.total_moments,
        servedMoments=served_moment_count(table.total_moments),
        currentLabel=(
            moment_label(table.current_moment, table.total_moments) if table.has_started else None
        ),
        currentCourse=table.current_course(),
        startTime=table.start_time,
        lastMomentTime=table.last_moment_time,
        momentsHistory=[
            to_moment_log_response(log, table.total_moments) for log in table.moments_history
        ],
        restriction=to_restriction_response(table.restriction),
    )


def to_kitchen_ticket_response(table: Table) -> KitchenTicketResponse:
    current = table.current_log()
    return KitchenTicketResponse(
        tableId=str(table.table_id),
        number=table.number,
        menu=table.menu or "",
        status=table.status.value,
        currentMoment=table.current_moment,
        totalMoments=table.total_moments,
        currentLabel=(
            moment_label(table.current_moment, table.total_moments) if table.has_started else None
        ),
        currentCourse=table.current_course(),
        pax=table.pax,
        language=table.language,
        restriction=to_restriction_response(table.restriction),
        preparingSince=current.start_time if current is not None else None,
    )
