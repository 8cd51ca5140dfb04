"""
Task service layer: every mutation of tasks, remarks and work logs.

Handles:
- Task CRUD against the positional row store
- Terminal-status write lock (Done / Completed), re-checked at mutation time
- Single running timer per task
- Lost-update protection: a per-task asyncio.Lock serialises read-check-write
  sequences in this process, and the task row's version cell rejects stale
  updates (ConflictError). Lock entries live only while someone holds or
  waits on them, so unknown or deleted ids leave nothing behind.

Every successful mutation answers with a freshly re-read and re-assembled
Task, never a locally patched copy.
"""

from __future__ import annotations

import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Callable

import structlog

from taskboard_server.core.errors import (
    ConflictError,
    NoRunningTimerError,
    NotFoundError,
    TaskLockedError,
    TimerAlreadyRunningError,
)
from taskboard_server.services.assembler import assemble
from taskboard_server.store.base import Collection, RowStore
from taskboard_server.store.tables import EntityTable
from taskboard_shared.schemas.tasks import (
    Remark,
    Task,
    TaskCreate,
    TaskUpdate,
    WorkLog,
)

log = structlog.get_logger()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


class _TaskLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class TaskService:
    def __init__(self, store: RowStore, clock: Callable[[], datetime] = utcnow):
        self.tasks: EntityTable[Task] = EntityTable(store, Collection.TASKS)
        self.remarks: EntityTable[Remark] = EntityTable(store, Collection.REMARKS)
        self.work_logs: EntityTable[WorkLog] = EntityTable(store, Collection.WORK_LOGS)
        self._clock = clock
        self._locks: dict[str, _TaskLock] = {}

    @asynccontextmanager
    async def _task_lock(self, task_id: str) -> AsyncIterator[None]:
        entry = self._locks.get(task_id)
        if entry is None:
            entry = self._locks[task_id] = _TaskLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[task_id]

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    async def list_tasks(self) -> list[Task]:
        task_rows, remark_rows, work_log_rows = await asyncio.gather(
            self.tasks.rows(), self.remarks.rows(), self.work_logs.rows()
        )
        return assemble(task_rows, remark_rows, work_log_rows)

    async def get_task(self, task_id: str) -> Task:
        for task in await self.list_tasks():
            if task.id == task_id:
                return task
        raise NotFoundError(Collection.TASKS.value, task_id)

    async def _find_unlocked(self, task_id: str) -> tuple[int, Task]:
        position, task = await self.tasks.find(task_id)
        if task.locked:
            raise TaskLockedError(task_id, task.status.value)
        return position, task

    # -----------------------------------------------------------------------
    # Task CRUD
    # -----------------------------------------------------------------------

    async def create_task(self, task_in: TaskCreate) -> Task:
        task = Task(
            **task_in.model_dump(),
            id=new_id("task"),
            created_at=self._clock(),
        )
        await self.tasks.append(task)
        log.info("task.created", task_id=task.id, assignee_id=task.assignee_id)
        return task

    async def update_task(self, task_id: str, task_in: TaskUpdate) -> Task:
        changes = task_in.model_dump(exclude_unset=True, exclude_none=True, exclude={"version"})

        async with self._task_lock(task_id):
            position, current = await self.tasks.find(task_id)
            if task_in.version is not None and task_in.version != current.version:
                raise ConflictError(task_id, task_in.version, current.version)
            if changes:
                if current.locked:
                    raise TaskLockedError(task_id, current.status.value)
                await self.tasks.update_at(position, {**changes, "version": current.version + 1})
                log.info(
                    "task.updated",
                    task_id=task_id,
                    fields=sorted(changes),
                    version=current.version + 1,
                )

        return await self.get_task(task_id)

    async def delete_task(self, task_id: str) -> None:
        # Remarks and work logs are left in place as an audit trail.
        async with self._task_lock(task_id):
            position, _ = await self._find_unlocked(task_id)
            await self.tasks.clear_at(position)
        log.info("task.deleted", task_id=task_id, position=position)

    # -----------------------------------------------------------------------
    # Remarks
    # -----------------------------------------------------------------------

    async def add_remark(self, task_id: str, text: str) -> Task:
        async with self._task_lock(task_id):
            await self._find_unlocked(task_id)
            remark = Remark(id=new_id("rem"), task_id=task_id, text=text, created_at=self._clock())
            await self.remarks.append(remark)
        log.info("task.remark_added", task_id=task_id, remark_id=remark.id)
        return await self.get_task(task_id)

    # -----------------------------------------------------------------------
    # Timers
    # -----------------------------------------------------------------------

    async def start_timer(self, task_id: str) -> Task:
        async with self._task_lock(task_id):
            await self._find_unlocked(task_id)
            running = self.work_logs.first_position(
                await self.work_logs.rows(),
                lambda wl: wl.task_id == task_id and wl.running,
            )
            if running is not None:
                raise TimerAlreadyRunningError(task_id)
            work_log = WorkLog(id=new_id("wl"), task_id=task_id, start_time=self._clock())
            await self.work_logs.append(work_log)
        log.info("task.timer_started", task_id=task_id, work_log_id=work_log.id)
        return await self.get_task(task_id)

    async def stop_timer(self, task_id: str) -> Task:
        async with self._task_lock(task_id):
            await self._find_unlocked(task_id)
            # First running row in collection order wins if duplicates exist.
            position = self.work_logs.first_position(
                await self.work_logs.rows(),
                lambda wl: wl.task_id == task_id and wl.running,
            )
            if position is None:
                raise NoRunningTimerError(task_id)
            await self.work_logs.update_at(position, {"end_time": self._clock()})
        log.info("task.timer_stopped", task_id=task_id, position=position)
        return await self.get_task(task_id)
