from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from moments.api.security import AdminDisabledError, AdminUnauthorizedError, verify_admin_secret
from moments.api.services import AppServices
from moments.api.ws.manager import ConnectionManager
from moments.application.use_cases.context import TraceContext
from moments.domain.notification.entities import Role

router = APIRouter()
logger = logging.getLogger(__name__)


def _parse_role(value: str | None) -> Role | None:
    try:
        return Role(value) if value else None
    except ValueError:
        return None


def _late_joiner_snapshots(services: AppServices) -> list[str]:
    # runs in a worker thread: the store lock is a threading lock
    with services.store.transaction():
        return services.broadcaster.snapshot_messages(
            tables=services.store.tables.list(),
            menus=services.store.menus.list(),
            services=services.store.history.list(),
            trace_ctx=TraceContext(trace_id=None, request_id=None),
        )


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    services: AppServices = websocket.app.state.services
    session_id = websocket.query_params.get("session_id", services.session_id)
    if session_id != services.session_id:
        await websocket.close(code=1008, reason=f"unknown session_id {session_id}")
        return

    role = _parse_role(websocket.query_params.get("role"))
    if role is None:
        await websocket.close(code=1008, reason="role must be one of floor, kitchen, admin")
        return
    if role == Role.ADMIN:
        try:
            verify_admin_secret(websocket.query_params.get("secret"))
        except (AdminDisabledError, AdminUnauthorizedError) as exc:
            await websocket.close(code=1008, reason=str(exc))
            return

    await websocket.accept()
    manager: ConnectionManager = websocket.app.state.ws_manager
    await manager.register(websocket=websocket, session_id=session_id, role=role.value)
    try:
        snapshots = await run_in_threadpool(_late_joiner_snapshots, services)
        for message in snapshots:
            await websocket.send_text(message)

        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)
    except Exception:
        logger.exception("ws_connection_error", extra={"session_id": session_id})
        await manager.unregister(websocket)
