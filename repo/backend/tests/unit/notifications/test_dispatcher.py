from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from moments.application.notifications.dispatcher import NotificationDispatcher, ViewSettings
from moments.domain.notification.entities import (
    ALERT_TAG,
    ALERT_TONE,
    ALERT_VIBRATION_PATTERN_MS,
    Notification,
    Role,
)


class FakeAudio:
    def __init__(self, fail: bool = False) -> None:
        self.played = []
        self._fail = fail

    def play(self, cue) -> None:
        if self._fail:
            raise RuntimeError("audio context suspended")
        self.played.append(cue)


class FakeNotifier:
    def __init__(self, granted: bool = True, fail: bool = False) -> None:
        self.granted = granted
        self.fail = fail
        self.permission_requests = 0
        self.shown: list[tuple[str, str, str]] = []

    def request_permission(self) -> bool:
        self.permission_requests += 1
        return self.granted

    def notify(self, title: str, body: str, tag: str) -> None:
        if self.fail:
            raise RuntimeError("notifications blocked")
        self.shown.append((title, body, tag))


class FakeVibrator:
    def __init__(self) -> None:
        self.patterns = []

    def vibrate(self, pattern_ms) -> None:
        self.patterns.append(pattern_ms)


def _floor_alert() -> Notification:
    return Notification(target_role=Role.FLOOR, title="Table 10", body="Moment 3 ready")


def _dispatcher(**kwargs) -> NotificationDispatcher:
    dispatcher = NotificationDispatcher(**kwargs)
    dispatcher.role = Role.FLOOR
    dispatcher.request_permission()
    return dispatcher


def test_dispatch_uses_every_channel_for_matching_role() -> None:
    audio, notifier, vibrator = FakeAudio(), FakeNotifier(), FakeVibrator()
    dispatcher = _dispatcher(audio=audio, notifier=notifier, vibrator=vibrator)

    dispatcher.dispatch(_floor_alert())

    assert audio.played == [ALERT_TONE]
    assert notifier.shown == [("Table 10", "Moment 3 ready", ALERT_TAG)]
    assert vibrator.patterns == [ALERT_VIBRATION_PATTERN_MS]


def test_alert_tone_shape() -> None:
    assert ALERT_TONE.start_hz == 880
    assert ALERT_TONE.end_hz == 440
    assert ALERT_TONE.duration_seconds == 0.5
    assert ALERT_VIBRATION_PATTERN_MS == (200, 100, 200)


def test_dispatch_ignores_other_roles() -> None:
    audio, notifier = FakeAudio(), FakeNotifier()
    dispatcher = _dispatcher(audio=audio, notifier=notifier)

    dispatcher.dispatch(Notification(target_role=Role.KITCHEN, title="t", body="b"))
    dispatcher.role = None
    dispatcher.dispatch(_floor_alert())

    assert audio.played == []
    assert notifier.shown == []


def test_muted_view_skips_only_audio() -> None:
    audio, notifier = FakeAudio(), FakeNotifier()
    dispatcher = _dispatcher(
        audio=audio, notifier=notifier, settings=ViewSettings(sound_enabled=False)
    )

    dispatcher.dispatch(_floor_alert())

    assert audio.played == []
    assert len(notifier.shown) == 1


def test_system_alert_requires_granted_permission() -> None:
    notifier = FakeNotifier(granted=False)
    dispatcher = _dispatcher(notifier=notifier)

    dispatcher.dispatch(_floor_alert())

    assert not dispatcher.permission_granted
    assert notifier.shown == []


def test_permission_is_requested_once() -> None:
    notifier = FakeNotifier()
    dispatcher = _dispatcher(notifier=notifier)

    dispatcher.request_permission()

    assert notifier.permission_requests == 1


def test_channel_failures_are_swallowed() -> None:
    vibrator = FakeVibrator()
    dispatcher = _dispatcher(
        audio=FakeAudio(fail=True),
        notifier=FakeNotifier(fail=True),
        vibrator=vibrator,
    )

    dispatcher.dispatch(_floor_alert())

    assert vibrator.patterns == [ALERT_VIBRATION_PATTERN_MS]


def test_dispatch_without_channels_is_a_no_op() -> None:
    dispatcher = _dispatcher()

    dispatcher.dispatch(_floor_alert())
