"""
Board analysis: time tracked, overdue work, status and priority breakdowns.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from taskboard_shared.schemas.common import TASK_STATUS_ORDER, TaskPriority, TaskStatus
from taskboard_shared.schemas.tasks import Task

OVERDUE_AFTER = timedelta(days=7)
RECENTLY_COMPLETED_LIMIT = 5


class Analysis(BaseModel):
    total_tasks: int
    total_hours: float
    overdue_tasks: int
    by_status: dict[TaskStatus, int] = Field(default_factory=dict)
    by_priority: dict[TaskPriority, int] = Field(default_factory=dict)
    recently_completed: list[Task] = Field(default_factory=list)


def tracked_time(task: Task, now: Optional[datetime] = None) -> timedelta:
    """Sum of work log durations. A running log accrues until ``now`` unless the task is locked."""
    now = now or datetime.now(timezone.utc)
    total = timedelta()
    for wl in task.work_logs:
        if wl.end_time is not None:
            end = wl.end_time
        else:
            end = wl.start_time if task.locked else now
        total += max(end - wl.start_time, timedelta())
    return total


def format_duration(delta: timedelta) -> str:
    seconds = max(int(delta.total_seconds()), 0)
    hours, rem = divmod(seconds, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def _last_end(task: Task) -> datetime:
    if task.work_logs and task.work_logs[-1].end_time is not None:
        return task.work_logs[-1].end_time
    return datetime.min.replace(tzinfo=timezone.utc)


def analyze(tasks: Sequence[Task], now: Optional[datetime] = None) -> Analysis:
    now = now or datetime.now(timezone.utc)

    # Running timers count as zero here; only closed sessions are "logged".
    logged = timedelta()
    for task in tasks:
        for wl in task.work_logs:
            if wl.end_time is not None:
                logged += wl.end_time - wl.start_time

    overdue = sum(
        1 for t in tasks if t.status == TaskStatus.TODO and t.created_at < now - OVERDUE_AFTER
    )
    completed = sorted(
        (t for t in tasks if t.status == TaskStatus.COMPLETED), key=_last_end, reverse=True
    )

    return Analysis(
        total_tasks=len(tasks),
        total_hours=round(logged.total_seconds() / 3600, 1),
        overdue_tasks=overdue,
        by_status={s: sum(1 for t in tasks if t.status == s) for s in TASK_STATUS_ORDER},
        by_priority={p: sum(1 for t in tasks if t.priority == p) for p in TaskPriority},
        recently_completed=completed[:RECENTLY_COMPLETED_LIMIT],
    )
