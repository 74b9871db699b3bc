from __future__ import annotations

from fastapi import APIRouter, Depends

from moments.api.dependencies import get_services, trace_context
from moments.api.security import require_admin
from moments.api.services import AppServices
from moments.application.dto.requests import CreateMenuRequest, UpdateMenuRequest
from moments.application.dto.responses import (
    MenuListResponse,
    MenuResponse,
    PairingListResponse,
)
from moments.application.use_cases.context import TraceContext
from moments.application.use_cases.manage_menus import (
    CreateMenu,
    DeleteMenu,
    ListMenus,
    ListPairings,
    UpdateMenu,
)
from moments.domain.common.ids import MenuId

router = APIRouter()


@router.get("/v1/menus", response_model=MenuListResponse)
def list_menus(
    active: bool = False,
    services: AppServices = Depends(get_services),
) -> MenuListResponse:
    return ListMenus(store=services.store).execute(active_only=active)


@router.get("/v1/pairings", response_model=PairingListResponse)
def list_pairings(services: AppServices = Depends(get_services)) -> PairingListResponse:
    return ListPairings(store=services.store).execute()


@router.post(
    "/v1/menus",
    response_model=MenuResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_menu(
    request_dto: CreateMenuRequest,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> MenuResponse:
    return CreateMenu(store=services.store, broadcaster=services.broadcaster).execute(
        request_dto=request_dto, trace_ctx=trace_ctx
    )


@router.patch(
    "/v1/menus/{menu_id}",
    response_model=MenuResponse,
    dependencies=[Depends(require_admin)],
)
def update_menu(
    menu_id: str,
    request_dto: UpdateMenuRequest,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> MenuResponse:
    return UpdateMenu(store=services.store, broadcaster=services.broadcaster).execute(
        menu_id=MenuId(menu_id), request_dto=request_dto, trace_ctx=trace_ctx
    )


@router.delete(
    "/v1/menus/{menu_id}",
    response_model=MenuListResponse,
    dependencies=[Depends(require_admin)],
)
def delete_menu(
    menu_id: str,
    services: AppServices = Depends(get_services),
    trace_ctx: TraceContext = Depends(trace_context),
) -> MenuListResponse:
    return DeleteMenu(store=services.store, broadcaster=services.broadcaster).execute(
        menu_id=MenuId(menu_id), trace_ctx=trace_ctx
    )
