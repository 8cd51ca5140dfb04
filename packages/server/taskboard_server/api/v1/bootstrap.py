"""Bootstrap endpoint: tasks, users and reporting lines in one round trip."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends

from taskboard_server.api.deps import get_task_service, get_user_service
from taskboard_server.services.tasks import TaskService
from taskboard_server.services.users import UserService
from taskboard_shared.schemas.users import Bootstrap

router = APIRouter()


@router.get("/bootstrap", response_model=Bootstrap)
async def bootstrap_endpoint(
    tasks: TaskService = Depends(get_task_service),
    users: UserService = Depends(get_user_service),
):
    """Everything the board needs at startup."""
    task_list, user_list, reporting = await asyncio.gather(
        tasks.list_tasks(), users.list_users(), users.list_reporting()
    )
    return Bootstrap(tasks=task_list, users=user_list, reporting=reporting)
