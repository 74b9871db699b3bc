from __future__ import annotations

from fastapi import APIRouter, Depends

from moments.api.dependencies import get_services, trace_context
from moments.api.services import AppServices
from moments.application.dto.responses import KitchenBoardResponse, TableResponse
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.list_tables import GetKitchenBoard
from moments.application.use_cases.mark_moment_ready import MarkMomentReady
from moments.domain.common.ids import TableId

router = APIRouter()


@router.get("/v1/kitchen/board", response_model=KitchenBoardResponse)
def kitchen_board(services: AppServices = Depends(get_services)) -> KitchenBoardResponse:
    return GetKitchenBoard(store=services.store).execute()


@router.post("/v1/kitchen/tables/{table_id}/ready", response_model=TableResponse)
def mark_moment_ready(
    table_id: str,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> TableResponse:
    return MarkMomentReady(store=services.store, broadcaster=services.broadcaster).execute(
        table_id=TableId(table_id), trace_ctx=trace_ctx
    )
