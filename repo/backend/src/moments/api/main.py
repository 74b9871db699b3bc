from __future__ import annotations

import asyncio
import logging
import os
import time
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from moments.api.error_handling import register_exception_handlers
from moments.api.middleware.request_id import RequestIDMiddleware
from moments.api.routes.health import router as health_router
from moments.api.routes.history import router as history_router
from moments.api.routes.kitchen import router as kitchen_router
from moments.api.routes.menus import router as menus_router
from moments.api.routes.metrics import router as metrics_router
from moments.api.routes.tables import router as tables_router
from moments.api.services import build_services
from moments.api.ws.bridge import WebSocketBridge
from moments.api.ws.manager import ConnectionManager
from moments.api.ws.routes import router as ws_router
from moments.application.mappers.event_envelope import sync_channel
from moments.infrastructure.messaging.redis_event_listener import start_redis_relay
from moments.infrastructure.observability.logging_config import configure_logging
from moments.infrastructure.observability.otel import configure_otel

logger = logging.getLogger("moments.api.access")

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)


def _cors_allow_origins() -> list[str]:
    env = os.getenv("APP_ENV", "dev").lower()

    if env in {"dev", "test"}:
        return ["*"]

    default_value = "http://localhost:5173"
    raw_value = os.getenv("CORS_ALLOW_ORIGINS", default_value)
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        path = request.url.path
        method = request.method
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - started) * 1000
            REQUEST_COUNT.labels(method=method, path=path, status_code="500").inc()
            REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000)
            logger.exception(
                "request_error",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": 500,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        REQUEST_COUNT.labels(method=method, path=path, status_code=str(response.status_code)).inc()
        REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000)
        logger.info(
            "request_complete",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    services = app.state.services
    bridge = WebSocketBridge(manager=app.state.ws_manager, session_id=services.session_id)
    pump_task = bridge.start()
    unsubscribe = services.local_bus.subscribe(sync_channel(services.session_id), bridge.enqueue)
    relay_task = asyncio.create_task(start_redis_relay(services.local_bus))
    try:
        yield
    finally:
        unsubscribe()
        bridge.stop()
        for task in (relay_task, pump_task):
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Moments Service", version="0.1.0", lifespan=lifespan)
    app.state.services = build_services()
    app.state.ws_manager = ConnectionManager()

    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(tables_router)
    app.include_router(kitchen_router)
    app.include_router(menus_router)
    app.include_router(history_router)
    app.include_router(ws_router)

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    configure_otel(app)
    return app


app = create_app()
