from __future__ import annotations

from moments.application.dto.responses import HistoricalServiceResponse, MomentLogResponse
from moments.domain.service.entities import HistoricalService


def to_historical_service_response(service: HistoricalService) -> HistoricalServiceResponse:
    return HistoricalServiceResponse(
        serviceId=str(service.service_id),
        tableNumber=service.table_number,
        menuName=service.menu_name,
        pairing=service.pairing,
        startTime=service.start_time,
        endTime=service.end_time,
        momentsHistory=[
            MomentLogResponse(
                momentNumber=log.moment_number,
                momentName=log.moment_name,
                startTime=log.start_time,
                readyTime=log.ready_time,
                finishTime=log.finish_time,
            )
            for log in service.moments_history
        ],
    )
