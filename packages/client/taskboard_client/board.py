"""
Optimistic task board.

``TaskBoard`` mirrors the server's task list. Every change goes through
``dispatch`` and the pure ``reduce`` function:

- optimistic apply: the speculative result of a mutation, before the call
- reconcile: the server's Task replaces the local entry outright
- rollback: the task's entry from the pre-mutation snapshot comes back if the
  call fails (the whole Task, not individual fields)

Mutations are not queued. Responses are applied in the order they arrive,
so the last response to resolve wins. Mutations on different tasks are
independent. A failing mutation restores the entry it snapshotted, which can
undo a concurrent mutation on the same task that succeeded in between; this
is a known gap, not something reconciled here.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Sequence, Union

import structlog

from taskboard_shared.schemas.tasks import Remark, Task, TaskCreate, TaskUpdate, WorkLog
from taskboard_shared.schemas.users import ReportingEdge, UserPublic

from .api import ApiError, TaskBoardAPI

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Actions & reducer
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Replace:
    tasks: tuple[Task, ...]


@dataclass(frozen=True)
class Upsert:
    """Replace the entry with the same id; unknown ids are ignored."""
    task: Task


@dataclass(frozen=True)
class Remove:
    task_id: str


@dataclass(frozen=True)
class Append:
    task: Task


@dataclass(frozen=True)
class Restore:
    """Put one task back as it was in ``snapshot``; absent there means removed."""
    snapshot: tuple[Task, ...]
    task_id: str


Action = Union[Replace, Upsert, Remove, Append, Restore]


def reduce(tasks: Sequence[Task], action: Action) -> list[Task]:
    if isinstance(action, Replace):
        return list(action.tasks)
    if isinstance(action, Upsert):
        return [action.task if t.id == action.task.id else t for t in tasks]
    if isinstance(action, Remove):
        return [t for t in tasks if t.id != action.task_id]
    if isinstance(action, Append):
        return [*tasks, action.task]
    if isinstance(action, Restore):
        return _restore(tasks, action)
    raise TypeError(f"Unknown board action: {action!r}")


def _restore(tasks: Sequence[Task], action: Restore) -> list[Task]:
    before = next((t for t in action.snapshot if t.id == action.task_id), None)
    if before is None:
        return [t for t in tasks if t.id != action.task_id]
    if any(t.id == action.task_id for t in tasks):
        return [before if t.id == action.task_id else t for t in tasks]
    # Optimistically removed: reinsert after the neighbours that are still here.
    present = {t.id for t in tasks}
    at = sum(1 for t in action.snapshot[: action.snapshot.index(before)] if t.id in present)
    return [*tasks[:at], before, *tasks[at:]]


def _local_id(prefix: str) -> str:
    return f"local-{prefix}-{uuid.uuid4().hex[:8]}"


# ---------------------------------------------------------------------------
# Board
# ---------------------------------------------------------------------------


class TaskBoard:
    def __init__(
        self,
        api: TaskBoardAPI,
        *,
        send_versions: bool = False,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._api = api
        self._send_versions = send_versions
        self._clock = clock
        self._tasks: list[Task] = []
        self.users: list[UserPublic] = []
        self.reporting: list[ReportingEdge] = []

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    def dispatch(self, action: Action) -> None:
        self._tasks = reduce(self._tasks, action)

    async def load(self) -> bool:
        try:
            data = await self._api.bootstrap()
        except ApiError as exc:
            log.error("board.load_failed", error=exc.message)
            return False
        self.dispatch(Replace(tuple(data.tasks)))
        self.users = data.users
        self.reporting = data.reporting
        log.info("board.loaded", tasks=len(data.tasks), users=len(data.users))
        return True

    async def _mutate(
        self,
        op: str,
        task_id: str,
        speculative: Optional[Action],
        call: Callable[[], Awaitable[Optional[Task]]],
    ) -> tuple[bool, Optional[Task]]:
        snapshot = tuple(self._tasks)
        if speculative is not None:
            self.dispatch(speculative)
        try:
            result = await call()
        except ApiError as exc:
            log.error("board.rollback", op=op, task_id=task_id, status=exc.status, error=exc.message)
            self.dispatch(Restore(snapshot, task_id))
            return False, None
        if result is not None:
            self.dispatch(Upsert(result))
        return True, result

    # --- Mutations ---

    async def add_task(self, task_in: TaskCreate) -> Optional[Task]:
        """Not optimistic: the task appears once the server has assigned its id."""
        try:
            task = await self._api.create_task(task_in)
        except ApiError as exc:
            log.error("board.add_failed", title=task_in.title, error=exc.message)
            return None
        self.dispatch(Append(task))
        return task

    async def update_task(self, task_id: str, updates: TaskUpdate) -> Optional[Task]:
        current = self.get(task_id)
        speculative = None
        if current is not None:
            patch = updates.model_dump(exclude_unset=True, exclude_none=True, exclude={"version"})
            speculative = Upsert(current.model_copy(update=patch))
            if self._send_versions and updates.version is None:
                updates = updates.model_copy(update={"version": current.version})
        _, task = await self._mutate(
            "update", task_id, speculative, lambda: self._api.update_task(task_id, updates)
        )
        return task

    async def delete_task(self, task_id: str) -> bool:
        async def call() -> None:
            await self._api.delete_task(task_id)

        ok, _ = await self._mutate("delete", task_id, Remove(task_id), call)
        return ok

    async def add_remark(self, task_id: str, text: str) -> Optional[Task]:
        if not text.strip():
            log.warning("board.remark_rejected", task_id=task_id, reason="blank")
            return None
        current = self.get(task_id)
        speculative = None
        if current is not None:
            remark = Remark(id=_local_id("rem"), task_id=task_id, text=text, created_at=self._clock())
            speculative = Upsert(current.model_copy(update={"remarks": [*current.remarks, remark]}))
        _, task = await self._mutate(
            "remark", task_id, speculative, lambda: self._api.add_remark(task_id, text)
        )
        return task

    async def start_timer(self, task_id: str) -> Optional[Task]:
        current = self.get(task_id)
        speculative = None
        if current is not None:
            work_log = WorkLog(id=_local_id("wl"), task_id=task_id, start_time=self._clock())
            speculative = Upsert(
                current.model_copy(update={"work_logs": [*current.work_logs, work_log]})
            )
        _, task = await self._mutate(
            "timer_start", task_id, speculative, lambda: self._api.start_timer(task_id)
        )
        return task

    async def stop_timer(self, task_id: str) -> Optional[Task]:
        current = self.get(task_id)
        speculative = None
        if current is not None and current.running_log is not None:
            running = current.running_log
            now = self._clock()
            work_logs = [
                wl.model_copy(update={"end_time": now}) if wl is running else wl
                for wl in current.work_logs
            ]
            speculative = Upsert(current.model_copy(update={"work_logs": work_logs}))
        _, task = await self._mutate(
            "timer_stop", task_id, speculative, lambda: self._api.stop_timer(task_id)
        )
        return task

    async def describe(self, title: str) -> Optional[str]:
        try:
            return await self._api.describe(title)
        except ApiError as exc:
            log.error("board.describe_failed", title=title, error=exc.message)
            return None
