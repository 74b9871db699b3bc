from __future__ import annotations

from typing import Protocol

from moments.domain.notification.entities import ToneCue


class AudioOutput(Protocol):
    def play(self, cue: ToneCue) -> None: ...


class SystemNotifier(Protocol):
    def request_permission(self) -> bool: ...

    def notify(self, title: str, body: str, tag: str) -> None: ...


class Vibrator(Protocol):
    def vibrate(self, pattern_ms: tuple[int, ...]) -> None: ...
