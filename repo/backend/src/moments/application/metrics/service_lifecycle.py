from __future__ import annotations

from prometheus_client import Counter, Histogram

from moments.domain.table.entities import MomentLog

MOMENT_TRANSITION_TOTAL = Counter(
    "moments_transition_total",
    "Total number of accepted table service transitions.",
    ["operation"],
)

MOMENT_TRANSITION_REJECTED_TOTAL = Counter(
    "moments_transition_rejected_total",
    "Total number of rejected table service transitions.",
    ["operation", "reason"],
)

MOMENT_KITCHEN_SECONDS = Histogram(
    "moments_kitchen_seconds",
    "Time between a moment being started and marked ready.",
    buckets=(60, 120, 240, 360, 480, 600, 900, 1200, 1800),
)

SERVICES_FINISHED_TOTAL = Counter(
    "moments_services_finished_total",
    "Total number of finished services.",
    ["archived"],
)

SERVICE_DURATION_SECONDS = Histogram(
    "moments_service_duration_seconds",
    "Total duration of archived services.",
    ["menu"],
    buckets=(1800, 3600, 5400, 7200, 9000, 10800, 14400),
)

SYNC_PUBLISH_FAILURES_TOTAL = Counter(
    "moments_sync_publish_failures_total",
    "Total number of sync messages that could not be published.",
    ["event_type"],
)

NOTIFICATIONS_DISPATCHED_TOTAL = Counter(
    "moments_notifications_dispatched_total",
    "Total number of notifications rendered on a local view.",
    ["role"],
)

NOTIFICATION_CHANNEL_FAILURES_TOTAL = Counter(
    "moments_notification_channel_failures_total",
    "Total number of swallowed alert channel failures.",
    ["channel"],
)


def record_transition(operation: str) -> None:
    MOMENT_TRANSITION_TOTAL.labels(operation=operation).inc()


def record_transition_rejected(operation: str, reason: str) -> None:
    MOMENT_TRANSITION_REJECTED_TOTAL.labels(operation=operation, reason=reason).inc()


def record_kitchen_time(log: MomentLog | None) -> None:
    if log is None or log.start_time is None or log.ready_time is None:
        return
    MOMENT_KITCHEN_SECONDS.observe(max((log.ready_time - log.start_time).total_seconds(), 0.0))


def record_service_finished(archived: bool, menu: str | None, duration_seconds: float | None) -> None:
    SERVICES_FINISHED_TOTAL.labels(archived="true" if archived else "false").inc()
    if archived and duration_seconds is not None:
        SERVICE_DURATION_SECONDS.labels(menu=menu or "").observe(max(duration_seconds, 0.0))


def record_sync_publish_failure(event_type: str) -> None:
    SYNC_PUBLISH_FAILURES_TOTAL.labels(event_type=event_type).inc()


def record_notification_dispatched(role: str) -> None:
    NOTIFICATIONS_DISPATCHED_TOTAL.labels(role=role).inc()


def record_notification_channel_failure(channel: str) -> None:
    NOTIFICATION_CHANNEL_FAILURES_TOTAL.labels(channel=channel).inc()
