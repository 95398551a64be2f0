import random
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from study_assistant.core.app_factory import create_application
from study_assistant.core.config import Settings
from study_assistant.infrastructure.persistence.sqlite import SQLiteKeyValueStore
from study_assistant.infrastructure.repositories.api_key_repository import ApiKeyRepository
from study_assistant.infrastructure.repositories.subscription_repository import SubscriptionRepository
from study_assistant.services.subscription_service import SubscriptionService

FIXED_NOW = datetime(2026, 1, 31, 12, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    config.addinivalue_line("markers", "payment: mark test as payment-related")
    config.addinivalue_line("markers", "api: mark test as going through the HTTP layer")


@pytest.fixture
def store(tmp_path):
    kv = SQLiteKeyValueStore(tmp_path / "store.db")
    yield kv
    kv.close()


@pytest.fixture
def clock():
    """Mutable clock; tests move time with ``clock.now = ...``."""
    return SimpleNamespace(now=FIXED_NOW)


@pytest.fixture
def subscription_repository(store):
    return SubscriptionRepository(store)


@pytest.fixture
def api_key_repository(store):
    return ApiKeyRepository(store)


@pytest.fixture
def subscription_service(subscription_repository, clock):
    return SubscriptionService(
        subscription_repository,
        clock=lambda: clock.now,
        rng=random.Random(7),
    )


def make_completion(content="Готовый текст", usage=None):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=usage,
    )


@pytest.fixture
def openai_client():
    """Stand-in for AsyncOpenAI exposing only what the gateway calls."""
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=make_completion())
    client.models.list = AsyncMock(return_value=SimpleNamespace(data=[]))
    client.close = AsyncMock()
    return client


@pytest.fixture
def app_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "app.db"))
    monkeypatch.setenv("PAYMENT_PROCESSING_DELAY", "0")
    monkeypatch.setenv("PAYMENT_SUCCESS_RATE", "1")
    monkeypatch.setenv("API_KEY_LATENCY_SCALE", "0")
    monkeypatch.setenv("API_KEY_FAILURE_RATE", "0")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return tmp_path


@pytest.fixture
def client(app_env):
    app = create_application(Settings())
    with TestClient(app) as test_client:
        yield test_client
