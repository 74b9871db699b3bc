from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from moments.application.ports.publisher import EventPublisher
from moments.application.sync.broadcaster import SyncBroadcaster
from moments.infrastructure.bootstrap.seed import build_store
from moments.infrastructure.cache.redis_client import redis_url
from moments.infrastructure.messaging.local_bus import LocalSyncBus
from moments.infrastructure.messaging.redis_publisher import RedisEventPublisher
from moments.infrastructure.store.memory_store import InMemoryServiceStore

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    session_id: str
    store: InMemoryServiceStore
    local_bus: LocalSyncBus
    publisher: EventPublisher
    broadcaster: SyncBroadcaster


def build_services(store: InMemoryServiceStore | None = None) -> AppServices:
    session_id = os.getenv("SESSION_ID", "default")
    store = store or build_store()
    local_bus = LocalSyncBus()

    # With Redis configured, messages reach the local bus through the relay
    # task, so every process sharing the session sees the same stream.
    publisher: EventPublisher = RedisEventPublisher() if redis_url() else local_bus
    logger.info(
        "services_built",
        extra={"session_id": session_id, "channel": type(publisher).__name__},
    )
    return AppServices(
        session_id=session_id,
        store=store,
        local_bus=local_bus,
        publisher=publisher,
        broadcaster=SyncBroadcaster(
            publisher=publisher,
            session_id=session_id,
            next_revision=store.next_revision,
        ),
    )
