from __future__ import annotations

from fastapi import APIRouter, Response, status

from moments.infrastructure.cache.redis_client import ping_redis, redis_url

router = APIRouter()


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response) -> dict[str, object]:
    # Redis is optional; without it the process serves its own session only.
    if redis_url() is None:
        return {"status": "ok"}

    redis_ready = ping_redis(timeout_seconds=1.0)
    if redis_ready:
        return {"status": "ok"}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "unavailable", "checks": {"redis": redis_ready}}
