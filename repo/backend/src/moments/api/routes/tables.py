from __future__ import annotations

from fastapi import APIRouter, Depends

from moments.api.dependencies import get_services, trace_context
from moments.api.services import AppServices
from moments.application.dto.requests import (
    SeatTableRequest,
    SelectMenuRequest,
    SelectPairingRequest,
    SetRestrictionRequest,
)
from moments.application.dto.responses import TableListResponse, TableResponse
from moments.application.use_cases.advance_moment import AdvanceMoment
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.finish_service import FinishService
from moments.application.use_cases.list_tables import GetTable, ListTables
from moments.application.use_cases.pause_table import PauseTable, ResumeTable
from moments.application.use_cases.seat_table import RecordSeated, SelectPairing
from moments.application.use_cases.select_menu import SelectMenu
from moments.application.use_cases.set_restriction import SetRestriction
from moments.domain.common.ids import MenuId, TableId

router = APIRouter()


@router.get("/v1/tables", response_model=TableListResponse)
def list_tables(services: AppServices = Depends(get_services)) -> TableListResponse:
    return ListTables(store=services.store).execute()


@router.get("/v1/tables/{table_id}", response_model=TableResponse)
def get_table(table_id: str, services: AppServices = Depends(get_services)) -> TableResponse:
    return GetTable(store=services.store).execute(TableId(table_id))


@router.post("/v1/tables/{table_id}/menu", response_model=TableResponse)
def select_menu(
    table_id: str,
    request_dto: SelectMenuRequest,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> TableResponse:
    return SelectMenu(store=services.store, broadcaster=services.broadcaster).execute(
        table_id=TableId(table_id),
        menu_id=MenuId(request_dto.menu_id),
        trace_ctx=trace_ctx,
    )


@router.post("/v1/tables/{table_id}/seated", response_model=TableResponse)
def record_seated(
    table_id: str,
    request_dto: SeatTableRequest,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> TableResponse:
    return RecordSeated(store=services.store, broadcaster=services.broadcaster).execute(
        table_id=TableId(table_id),
        pax=request_dto.pax,
        language=request_dto.language,
        trace_ctx=trace_ctx,
    )


@router.post("/v1/tables/{table_id}/pairing", response_model=TableResponse)
def select_pairing(
    table_id: str,
    request_dto: SelectPairingRequest,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> TableResponse:
    return SelectPairing(store=services.store, broadcaster=services.broadcaster).execute(
        table_id=TableId(table_id),
        pairing=request_dto.pairing,
        trace_ctx=trace_ctx,
    )


@router.post("/v1/tables/{table_id}/advance", response_model=TableResponse)
def advance_moment(
    table_id: str,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> TableResponse:
    return AdvanceMoment(store=services.store, broadcaster=services.broadcaster).execute(
        table_id=TableId(table_id), trace_ctx=trace_ctx
    )


@router.post("/v1/tables/{table_id}/pause", response_model=TableResponse)
def pause_table(
    table_id: str,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> TableResponse:
    return PauseTable(store=services.store, broadcaster=services.broadcaster).execute(
        table_id=TableId(table_id), trace_ctx=trace_ctx
    )


@router.post("/v1/tables/{table_id}/resume", response_model=TableResponse)
def resume_table(
    table_id: str,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> TableResponse:
    return ResumeTable(store=services.store, broadcaster=services.broadcaster).execute(
        table_id=TableId(table_id), trace_ctx=trace_ctx
    )


@router.post("/v1/tables/{table_id}/finish", response_model=TableResponse)
def finish_service(
    table_id: str,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> TableResponse:
    return FinishService(store=services.store, broadcaster=services.broadcaster).execute(
        table_id=TableId(table_id), trace_ctx=trace_ctx
    )


@router.put("/v1/tables/{table_id}/restriction", response_model=TableResponse)
def set_restriction(
    table_id: str,
    request_dto: SetRestrictionRequest,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> TableResponse:
    return SetRestriction(store=services.store, broadcaster=services.broadcaster).execute(
        table_id=TableId(table_id),
        restriction_type=request_dto.type,
        description=request_dto.description,
        trace_ctx=trace_ctx,
    )
