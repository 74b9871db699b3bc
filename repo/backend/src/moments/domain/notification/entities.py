from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    FLOOR = "floor"
    KITCHEN = "kitchen"
    ADMIN = "admin"

    @property
    def receives_alerts(self) -> bool:
        return self in (Role.FLOOR, Role.KITCHEN)


@dataclass(frozen=True)
class Notification:
    target_role: Role
    title: str
    body: str


@dataclass(frozen=True)
class ToneCue:
    """A single oscillator sweep with an exponential gain fade."""

    start_hz: float
    end_hz: float
    duration_seconds: float
    start_gain: float
    end_gain: float


ALERT_TONE = ToneCue(
    start_hz=880.0,
    end_hz=440.0,
    duration_seconds=0.5,
    start_gain=0.1,
    end_gain=0.01,
)

ALERT_VIBRATION_PATTERN_MS: tuple[int, ...] = (200, 100, 200)

ALERT_TAG = "moments-alert"
