"""Task-related Pydantic schemas for shared use across server and client."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .common import TaskPriority, TaskStatus, WireModel, is_locked


# ---------------------------------------------------------------------------
# Children
# ---------------------------------------------------------------------------

class Remark(WireModel):
    id: str
    task_id: str
    text: str
    created_at: datetime


class WorkLog(WireModel):
    """A timer session. ``end_time`` is None while the timer is running."""
    id: str
    task_id: str
    start_time: datetime
    end_time: Optional[datetime] = None

    @property
    def running(self) -> bool:
        return self.end_time is None


# ---------------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------------

class TaskBase(WireModel):
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: str


class TaskCreate(TaskBase):
    """Request body for POST /tasks: everything but id, createdAt and children."""


class TaskUpdate(WireModel):
    """Partial update. ``version``, when sent, must match the stored version."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assignee_id: Optional[str] = None
    version: Optional[int] = None


class Task(TaskBase):
    id: str
    created_at: datetime
    version: int = 0
    remarks: List[Remark] = Field(default_factory=list)
    work_logs: List[WorkLog] = Field(default_factory=list)

    @property
    def locked(self) -> bool:
        return is_locked(self.status)

    @property
    def running_log(self) -> Optional[WorkLog]:
        return next((log for log in self.work_logs if log.running), None)


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class RemarkCreate(WireModel):
    """Request body for POST /tasks/{id}/remarks."""
    text: str


class DescriptionRequest(WireModel):
    title: str


class DescriptionResponse(WireModel):
    description: str
