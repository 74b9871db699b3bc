from __future__ import annotations

import asyncio
import json
import logging

from moments.api.ws.manager import ConnectionManager
from moments.application.mappers.event_envelope import NOTIFICATION_CREATED

logger = logging.getLogger(__name__)


def notification_target(message: str) -> str | None:
    try:
        envelope = json.loads(message)
    except ValueError:
        return None
    if envelope.get("event_type") != NOTIFICATION_CREATED:
        return None
    target = envelope.get("payload", {}).get("targetRole")
    return str(target) if target else None


class WebSocketBridge:
    """Forwards local bus messages to the websocket clients of one session.

    Bus handlers run on worker threads; messages are handed to the event loop
    through a queue drained by a single pump task, which keeps per-socket
    delivery in publish order.
    """

    def __init__(self, manager: ConnectionManager, session_id: str) -> None:
        self._manager = manager
        self._session_id = session_id
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue[str] | None = None

    def start(self) -> asyncio.Task[None]:
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        return asyncio.create_task(self._pump())

    def stop(self) -> None:
        self._loop = None
        self._queue = None

    def enqueue(self, message: str) -> None:
        loop, queue = self._loop, self._queue
        if loop is None or queue is None or loop.is_closed():
            return
        try:
            loop.call_soon_threadsafe(queue.put_nowait, message)
        except RuntimeError:
            logger.warning("ws_bridge_loop_closed", extra={"session_id": self._session_id})

    async def _pump(self) -> None:
        queue = self._queue
        if queue is None:
            return
        while True:
            message = await queue.get()
            try:
                await self._manager.broadcast(
                    session_id=self._session_id,
                    message_json_str=message,
                    target_role=notification_target(message),
                )
            except Exception:
                logger.exception("ws_bridge_broadcast_failed", extra={"session_id": self._session_id})
