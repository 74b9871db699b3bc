from __future__ import annotations

import asyncio
import logging
from collections import defaultdict

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self) -> None:
        self._connections: dict[str, set[WebSocket]] = defaultdict(set)
        self._socket_session: dict[WebSocket, str] = {}
        self._socket_role: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def register(self, websocket: WebSocket, session_id: str, role: str) -> None:
        async with self._lock:
            self._connections[session_id].add(websocket)
            self._socket_session[websocket] = session_id
            self._socket_role[websocket] = role
        logger.info("ws_client_connected", extra={"session_id": session_id, "role": role})

    async def unregister(self, websocket: WebSocket) -> None:
        async with self._lock:
            session_id = self._socket_session.pop(websocket, None)
            self._socket_role.pop(websocket, None)
            if session_id is None:
                return
            sockets = self._connections.get(session_id)
            if not sockets:
                return
            sockets.discard(websocket)
            if not sockets:
                self._connections.pop(session_id, None)
        logger.info("ws_client_disconnected", extra={"session_id": session_id})

    async def connection_count(self, session_id: str) -> int:
        async with self._lock:
            return len(self._connections.get(session_id, ()))

    async def broadcast(
        self,
        session_id: str,
        message_json_str: str,
        target_role: str | None = None,
    ) -> None:
        async with self._lock:
            targets = [
                websocket
                for websocket in self._connections.get(session_id, set())
                if target_role is None or self._socket_role.get(websocket) == target_role
            ]

        stale: list[WebSocket] = []
        for websocket in targets:
            try:
                await websocket.send_text(message_json_str)
            except Exception:
                stale.append(websocket)

        for websocket in stale:
            await self.unregister(websocket)
