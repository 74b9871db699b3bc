from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from moments.application.metrics.service_lifecycle import (
    record_notification_channel_failure,
    record_notification_dispatched,
)
from moments.application.ports.platform import AudioOutput, SystemNotifier, Vibrator
from moments.domain.notification.entities import (
    ALERT_TAG,
    ALERT_TONE,
    ALERT_VIBRATION_PATTERN_MS,
    Notification,
    Role,
)

logger = logging.getLogger(__name__)


@dataclass
class ViewSettings:
    sound_enabled: bool = True


class NotificationDispatcher:
    """Turns notifications addressed to this view's role into alerts.

    Platform channels are optional and fallible; a missing channel is skipped
    and a failing one is logged, so ``dispatch`` never raises.
    """

    def __init__(
        self,
        audio: AudioOutput | None = None,
        notifier: SystemNotifier | None = None,
        vibrator: Vibrator | None = None,
        settings: ViewSettings | None = None,
    ) -> None:
        self._audio = audio
        self._notifier = notifier
        self._vibrator = vibrator
        self.settings = settings or ViewSettings()
        self.role: Role | None = None
        self._permission_requested = False
        self._permission_granted = False

    @property
    def permission_granted(self) -> bool:
        return self._permission_granted

    def request_permission(self) -> None:
        if self._permission_requested or self._notifier is None:
            return
        self._permission_requested = True
        try:
            self._permission_granted = bool(self._notifier.request_permission())
        except Exception:
            record_notification_channel_failure("permission")
            logger.warning("notification_permission_failed", exc_info=True)
            self._permission_granted = False

    def dispatch(self, notification: Notification) -> None:
        if self.role is None or notification.target_role != self.role:
            return

        record_notification_dispatched(self.role.value)
        audio = self._audio
        if audio is not None and self.settings.sound_enabled:
            self._attempt("audio", lambda: audio.play(ALERT_TONE))
        notifier = self._notifier
        if notifier is not None and self._permission_granted:
            self._attempt(
                "system",
                lambda: notifier.notify(notification.title, notification.body, ALERT_TAG),
            )
        vibrator = self._vibrator
        if vibrator is not None:
            self._attempt("vibration", lambda: vibrator.vibrate(ALERT_VIBRATION_PATTERN_MS))

    def _attempt(self, channel: str, action: Callable[[], None]) -> None:
        try:
            action()
        except Exception:
            record_notification_channel_failure(channel)
            logger.warning("notification_channel_failed", exc_info=True, extra={"channel": channel})
