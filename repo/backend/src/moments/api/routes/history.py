from __future__ import annotations

from fastapi import APIRouter, Depends

from moments.api.dependencies import get_services
from moments.api.security import require_admin
from moments.api.services import AppServices
from moments.application.dto.responses import HistoryResponse, ServiceReportResponse
from moments.application.use_cases.list_history import ListHistory
from moments.application.use_cases.service_report import GetServiceReport

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/v1/history", response_model=HistoryResponse)
def list_history(services: AppServices = Depends(get_services)) -> HistoryResponse:
    return ListHistory(store=services.store).execute()


@router.get("/v1/analytics", response_model=ServiceReportResponse)
def service_report(services: AppServices = Depends(get_services)) -> ServiceReportResponse:
    return GetServiceReport(store=services.store).execute()
