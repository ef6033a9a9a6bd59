"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any app import so settings are built
from the testing configuration.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("APP_RATE_LIMIT_CAPACITY", "10000")
os.environ.setdefault("APP_RATE_LIMIT_REFILL_PER_SECOND", "5000")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.adapters.metrics.in_memory import InMemoryRequestMetrics
from app.api.routes.users import get_user_event_observers, get_user_store
from app.core import metrics as metrics_module
from app.core.rate_limit import reset_admission_limiter
from app.main import app as main_app
from app.services.user_store import UserStore


class RecordingObserver:
    """Observer double that remembers every event it receives."""

    def __init__(self) -> None:
        self.events: list[tuple[str, int]] = []

    def notify(self, action: str, user_id: int) -> None:
        self.events.append((action, user_id))


@pytest.fixture(autouse=True)
def _reset_limiter():
    reset_admission_limiter()
    yield
    reset_admission_limiter()


@pytest.fixture
def store() -> UserStore:
    return UserStore()


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def request_metrics(monkeypatch: pytest.MonkeyPatch) -> InMemoryRequestMetrics:
    sink = InMemoryRequestMetrics()
    monkeypatch.setattr(metrics_module, "_request_metrics", sink)
    return sink


@pytest.fixture
def app(store: UserStore, observer: RecordingObserver, request_metrics) -> FastAPI:
    main_app.dependency_overrides[get_user_store] = lambda: store
    main_app.dependency_overrides[get_user_event_observers] = lambda: [observer]
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
