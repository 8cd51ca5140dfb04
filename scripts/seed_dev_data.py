#!/usr/bin/env python3
"""Seed a development store with users, reporting lines and sample tasks.

Usage:
    python scripts/seed_dev_data.py

Uses the same TB_* settings as the server (defaults to ./data/taskboard.db).
Users and reporting rows are skipped when their ids already exist.
"""

import asyncio

import structlog

from taskboard_server.core.config import get_settings
from taskboard_server.services.tasks import TaskService
from taskboard_server.store import Collection, build_store
from taskboard_server.store.codec import REPORTING_CODEC, USER_CODEC
from taskboard_shared.logging import configure_logging
from taskboard_shared.schemas.common import TaskPriority, TaskStatus, UserRole
from taskboard_shared.schemas.tasks import TaskCreate
from taskboard_shared.schemas.users import ReportingEdge, User

log = structlog.get_logger()

# Deterministic ids for reproducibility
USERS = [
    User(id="user-admin", username="admin", password="admin", name="Ada Admin", role=UserRole.ADMIN),
    User(id="user-bob", username="bob", password="bob", name="Bob Builder", role=UserRole.USER),
    User(id="user-cara", username="cara", password="cara", name="Cara Coder", role=UserRole.USER),
]
REPORTING = [
    ReportingEdge(id="rep-1", user_id="user-bob", report_to_user_id="user-admin"),
    ReportingEdge(id="rep-2", user_id="user-cara", report_to_user_id="user-admin"),
]
TASKS = [
    ("Write onboarding guide", TaskPriority.HIGH, TaskStatus.TODO, "user-bob"),
    ("Fix login redirect", TaskPriority.MEDIUM, TaskStatus.IN_PROGRESS, "user-cara"),
    ("Quarterly planning", TaskPriority.LOW, TaskStatus.ON_HOLD, "user-admin"),
]


async def seed():
    settings = get_settings()
    configure_logging(settings.log_level, "text")
    store = build_store(settings)
    try:
        existing_users = {row[0] for row in await store.read_range(Collection.USERS) if row}
        for user in USERS:
            if user.id not in existing_users:
                await store.append(Collection.USERS, USER_CODEC.encode(user))

        existing_edges = {row[0] for row in await store.read_range(Collection.REPORTING) if row}
        for edge in REPORTING:
            if edge.id not in existing_edges:
                await store.append(Collection.REPORTING, REPORTING_CODEC.encode(edge))

        service = TaskService(store)
        if not await service.list_tasks():
            for title, priority, status, assignee_id in TASKS:
                task = await service.create_task(
                    TaskCreate(title=title, priority=priority, status=status, assignee_id=assignee_id)
                )
                await service.add_remark(task.id, "Seeded for local development.")
    finally:
        await store.close()

    log.info("seed.done", backend=settings.store_backend, users=len(USERS), tasks=len(TASKS))


if __name__ == "__main__":
    asyncio.run(seed())
