"""
Shared fixtures for client tests.

``live_api`` talks to a real server app in-process (ASGITransport over a
MemoryRowStore); tests that need precise control of responses build a
TaskBoardAPI over httpx.MockTransport instead.
"""

from datetime import datetime, timezone

import httpx
import pytest

from taskboard_client.api import TaskBoardAPI
from taskboard_server.core.config import Settings
from taskboard_server.main import create_app
from taskboard_server.store import Collection, MemoryRowStore
from taskboard_shared.schemas.common import TaskPriority, TaskStatus
from taskboard_shared.schemas.tasks import Task

CREATED = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_task(task_id: str = "task-1", **fields) -> Task:
    values = {
        "id": task_id,
        "title": "Write proposal",
        "status": TaskStatus.IN_PROGRESS,
        "priority": TaskPriority.HIGH,
        "assignee_id": "u-bob",
        "created_at": CREATED,
    }
    values.update(fields)
    return Task(**values)


@pytest.fixture
def store():
    return MemoryRowStore(
        seed={
            Collection.USERS: [
                ["u-admin", "admin", "secret", "Ada Admin", "Admin"],
                ["u-bob", "bob", "hunter2", "Bob Builder", "User"],
            ],
            Collection.REPORTING: [["rep-1", "u-bob", "u-admin"]],
        }
    )


@pytest.fixture
async def live_api(store):
    settings = Settings(_env_file=None, store_backend="memory", log_level="warning", log_format="text")
    app = create_app(settings=settings, store=store)
    async with TaskBoardAPI("http://test/api", transport=httpx.ASGITransport(app=app)) as api:
        yield api


@pytest.fixture
def task_factory():
    return make_task
