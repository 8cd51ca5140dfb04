"""
Task assembler: joins the three flat collections into Task aggregates.

One pass over each child collection builds a taskId -> children mapping;
source order is preserved, nothing is sorted. Children whose task is gone
(deleted tasks keep their remarks and logs) are simply never attached.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Sequence

from taskboard_server.store.codec import REMARK_CODEC, TASK_CODEC, WORK_LOG_CODEC, is_live
from taskboard_shared.schemas.tasks import Remark, Task, WorkLog

Rows = Sequence[Sequence[str]]


def assemble(task_rows: Rows, remark_rows: Rows, work_log_rows: Rows) -> list[Task]:
    remarks_by_task: dict[str, list[Remark]] = defaultdict(list)
    for row in remark_rows:
        if is_live(row):
            remark = REMARK_CODEC.decode(row)
            remarks_by_task[remark.task_id].append(remark)

    logs_by_task: dict[str, list[WorkLog]] = defaultdict(list)
    for row in work_log_rows:
        if is_live(row):
            work_log = WORK_LOG_CODEC.decode(row)
            logs_by_task[work_log.task_id].append(work_log)

    tasks: list[Task] = []
    for row in task_rows:
        if not is_live(row):
            continue
        task = TASK_CODEC.decode(row)
        task.remarks = list(remarks_by_task.get(task.id, []))
        task.work_logs = list(logs_by_task.get(task.id, []))
        tasks.append(task)
    return tasks
