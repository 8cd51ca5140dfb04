"""
Shared fixtures for server tests.

The app runs in-process over httpx's ASGITransport against a MemoryRowStore,
so every test starts from a fresh, seeded store.
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient, ASGITransport

from taskboard_server.core.config import Settings
from taskboard_server.main import create_app
from taskboard_server.services.tasks import TaskService
from taskboard_server.store import Collection, MemoryRowStore

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

USER_ROWS = [
    ["u-admin", "admin", "secret", "Ada Admin", "Admin"],
    ["u-bob", "bob", "hunter2", "Bob Builder", "User"],
    ["u-cara", "cara", "pw", "Cara Coder", "User"],
]
REPORTING_ROWS = [
    ["rep-1", "u-bob", "u-admin"],
]


class FakeClock:
    """Deterministic clock: every call advances by ``step``."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(minutes=5)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + self.step
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryRowStore(
        seed={Collection.USERS: USER_ROWS, Collection.REPORTING: REPORTING_ROWS}
    )


@pytest.fixture
def service(store, clock):
    return TaskService(store, clock=clock)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        store_backend="memory",
        log_level="warning",
        log_format="text",
    )


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
