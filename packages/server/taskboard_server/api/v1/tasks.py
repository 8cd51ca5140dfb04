"""
Task endpoints: CRUD, remarks, timers, description suggestions.

Status columns: To Do / In Progress / On Hold move freely between each other;
Done and Completed are terminal and lock the task.
- Every mutation answers with the re-read Task, so the response carries
  remarks and work logs added concurrently by other clients.
- Domain errors are mapped by the handlers in taskboard_server.api.errors.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response

from taskboard_server.api.deps import get_description_service, get_task_service
from taskboard_server.services.descriptions import DescriptionService
from taskboard_server.services.tasks import TaskService
from taskboard_shared.schemas.tasks import (
    DescriptionRequest,
    DescriptionResponse,
    RemarkCreate,
    Task,
    TaskCreate,
    TaskUpdate,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Task CRUD
# ---------------------------------------------------------------------------


@router.get("", response_model=List[Task])
async def list_tasks_endpoint(service: TaskService = Depends(get_task_service)):
    return await service.list_tasks()


@router.post("", response_model=Task, status_code=201)
async def create_task_endpoint(
    task_in: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    """Create a new task. Id and createdAt are assigned here."""
    return await service.create_task(task_in)


@router.post("/describe", response_model=DescriptionResponse)
async def describe_task_endpoint(
    body: DescriptionRequest,
    descriptions: DescriptionService = Depends(get_description_service),
):
    """Suggest a description for a task title. Never fails."""
    return DescriptionResponse(description=await descriptions.describe(body.title))


@router.get("/{task_id}", response_model=Task)
async def get_task_endpoint(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    return await service.get_task(task_id)


@router.put("/{task_id}", response_model=Task)
async def update_task_endpoint(
    task_id: str,
    task_in: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    """Update task fields. Rejected once the task is Done or Completed."""
    return await service.update_task(task_id, task_in)


@router.delete("/{task_id}", status_code=204)
async def delete_task_endpoint(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    await service.delete_task(task_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Remarks & timers
# ---------------------------------------------------------------------------


@router.post("/{task_id}/remarks", response_model=Task)
async def add_remark_endpoint(
    task_id: str,
    body: RemarkCreate,
    service: TaskService = Depends(get_task_service),
):
    return await service.add_remark(task_id, body.text)


@router.post("/{task_id}/timer/start", response_model=Task)
async def start_timer_endpoint(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    """Start a timer. Fails if one is already running for the task."""
    return await service.start_timer(task_id)


@router.post("/{task_id}/timer/stop", response_model=Task)
async def stop_timer_endpoint(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    return await service.stop_timer(task_id)
