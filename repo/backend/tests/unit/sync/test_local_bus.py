from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from moments.infrastructure.messaging.local_bus import LocalSyncBus


def test_each_subscriber_receives_message_once() -> None:
    bus = LocalSyncBus()
    first: list[str] = []
    second: list[str] = []
    bus.subscribe("sync:s1", first.append)
    bus.subscribe("sync:s1", second.append)
    bus.subscribe("sync:other", lambda message: first.append("wrong channel"))

    bus.publish("sync:s1", "hello")

    assert first == ["hello"]
    assert second == ["hello"]


def test_failing_subscriber_does_not_block_others() -> None:
    bus = LocalSyncBus()
    received: list[str] = []

    def broken(message: str) -> None:
        raise RuntimeError("boom")

    bus.subscribe("sync:s1", broken)
    bus.subscribe("sync:s1", received.append)

    bus.publish("sync:s1", "hello")

    assert received == ["hello"]


def test_unsubscribe_stops_delivery() -> None:
    bus = LocalSyncBus()
    received: list[str] = []
    unsubscribe = bus.subscribe("sync:s1", received.append)

    unsubscribe()
    unsubscribe()
    bus.publish("sync:s1", "hello")

    assert received == []
    assert bus.subscriber_count("sync:s1") == 0
