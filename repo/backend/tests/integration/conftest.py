from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from moments.infrastructure.cache import redis_client

ADMIN_SECRET = "integration-secret"


@pytest.fixture(scope="session", autouse=True)
def integration_environment() -> Iterator[None]:
    os.environ["APP_ENV"] = "test"
    os.environ["SESSION_ID"] = "default"
    os.environ["ADMIN_SECRET"] = ADMIN_SECRET
    os.environ.pop("REDIS_URL", None)
    os.environ.pop("TABLE_ROSTER", None)
    os.environ.setdefault("OTEL_SERVICE_NAME", "moments-service-test")
    os.environ.setdefault("OTEL_EXPORTER_OTLP_ENDPOINT", "")
    redis_client._build_client.cache_clear()
    yield


@pytest.fixture
def app() -> FastAPI:
    from moments.api.main import create_app

    return create_app()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Secret": ADMIN_SECRET}
