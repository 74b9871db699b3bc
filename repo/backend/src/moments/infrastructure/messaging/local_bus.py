from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable

from moments.application.ports.publisher import EventPublisher

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str], None]


class LocalSyncBus(EventPublisher):
    """In-process fan-out of sync messages to every subscriber of a channel.

    Delivery is synchronous, at most once per subscriber per publish. A
    failing subscriber is logged and skipped; the others still receive the
    message.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[MessageHandler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, channel: str, handler: MessageHandler) -> Callable[[], None]:
        with self._lock:
            self._subscribers[channel].append(handler)

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._subscribers.get(channel)
                if not handlers or handler not in handlers:
                    return
                handlers.remove(handler)
                if not handlers:
                    self._subscribers.pop(channel, None)

        return unsubscribe

    def subscriber_count(self, channel: str) -> int:
        with self._lock:
            return len(self._subscribers.get(channel, ()))

    def publish(self, channel: str, message: str) -> None:
        with self._lock:
            targets = list(self._subscribers.get(channel, ()))

        for handler in targets:
            try:
                handler(message)
            except Exception:
                logger.exception("sync_subscriber_failed", extra={"channel": channel})
