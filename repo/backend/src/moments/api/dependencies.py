from __future__ import annotations

from fastapi import Request

from moments.api.middleware.request_id import get_request_id
from moments.api.services import AppServices
from moments.application.use_cases.context import TraceContext
from moments.infrastructure.observability.otel import current_trace_id


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())
