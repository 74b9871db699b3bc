from __future__ import annotations

import asyncio
import logging

from redis import asyncio as redis_asyncio

from moments.application.ports.publisher import EventPublisher
from moments.infrastructure.cache.redis_client import redis_url

logger = logging.getLogger(__name__)

SYNC_PATTERN = "sync:*"


def _decode_value(value: bytes | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


async def _close(resource: object) -> None:
    aclose = getattr(resource, "aclose", None)
    if callable(aclose):
        await aclose()
        return
    close = getattr(resource, "close", None)
    if callable(close):
        await close()


async def start_redis_relay(local_bus: EventPublisher) -> None:
    """Feed every ``sync:*`` message published on Redis into the local bus."""
    url = redis_url()
    if not url:
        logger.info("redis_relay_not_started", extra={"reason": "REDIS_URL missing"})
        return

    backoff_seconds = 1.0
    while True:
        client: redis_asyncio.Redis | None = None
        pubsub: redis_asyncio.client.PubSub | None = None
        try:
            client = redis_asyncio.from_url(url)
            pubsub = client.pubsub()
            await pubsub.psubscribe(SYNC_PATTERN)
            logger.info("redis_relay_subscribed", extra={"pattern": SYNC_PATTERN})
            backoff_seconds = 1.0

            while True:
                message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
                if message is None:
                    await asyncio.sleep(0.05)
                    continue

                channel = _decode_value(message.get("channel"))
                payload = _decode_value(message.get("data"))
                if not channel or not payload:
                    continue
                local_bus.publish(channel=channel, message=payload)
        except asyncio.CancelledError:
            logger.info("redis_relay_cancelled")
            raise
        except Exception:
            logger.exception(
                "redis_relay_error",
                extra={"backoff_seconds": backoff_seconds},
            )
            await asyncio.sleep(backoff_seconds)
            backoff_seconds = min(backoff_seconds * 2, 5.0)
        finally:
            if pubsub is not None:
                await _close(pubsub)
            if client is not None:
                await _close(client)
