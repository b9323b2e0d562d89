import os
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from src.api.dashboard import Dashboard  # noqa: E402
from src.api.main import create_app  # noqa: E402
from src.api.settings import get_settings  # noqa: E402
from src.api.state_store import StateStore  # noqa: E402
from src.api.storage import InMemoryKeyValueStorage  # noqa: E402

# Friday 2024-03-15 12:00 UTC
NOW = int(datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc).timestamp() * 1000)


class FakeClock:
    """Callable clock returning a settable epoch-millisecond instant."""

    def __init__(self, now: int) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, minutes: float) -> None:
        self.now += int(minutes * 60 * 1000)


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def storage():
    return InMemoryKeyValueStorage()


@pytest.fixture
def store(storage, clock):
    return StateStore(storage, key="night_shift_db", clock=clock)


@pytest.fixture
def dashboard(store, clock):
    return Dashboard(store, settings=get_settings(), clock=clock)


@pytest.fixture
def client(storage, clock):
    return TestClient(create_app(settings=get_settings(), storage=storage, clock=clock))
