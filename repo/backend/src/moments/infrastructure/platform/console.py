from __future__ import annotations

import sys
from typing import TextIO

from moments.domain.notification.entities import ToneCue


class TerminalBell:
    """Approximates the descending two-tone cue with two terminal bells."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout

    def play(self, cue: ToneCue) -> None:
        if not self._stream.isatty():
            return
        self._stream.write("\a\a")
        self._stream.flush()


class ConsoleNotifier:
    def __init__(self, prefix: str, stream: TextIO | None = None, granted: bool = True) -> None:
        self._prefix = prefix
        self._stream = stream or sys.stdout
        self._granted = granted

    def request_permission(self) -> bool:
        return self._granted

    def notify(self, title: str, body: str, tag: str) -> None:
        self._stream.write(f"[{self._prefix}] {title}: {body}\n")
        self._stream.flush()
