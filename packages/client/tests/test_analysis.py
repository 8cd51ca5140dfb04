"""Board analysis tests."""

from datetime import datetime, timedelta, timezone

from taskboard_client.analysis import analyze, format_duration, tracked_time
from taskboard_shared.schemas.common import TaskPriority, TaskStatus
from taskboard_shared.schemas.tasks import WorkLog

NOW = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)


def _log(log_id, task_id, start_hours_ago, hours=None):
    start = NOW - timedelta(hours=start_hours_ago)
    end = start + timedelta(hours=hours) if hours is not None else None
    return WorkLog(id=log_id, task_id=task_id, start_time=start, end_time=end)


def test_format_duration():
    assert format_duration(timedelta()) == "00:00:00"
    assert format_duration(timedelta(hours=27, minutes=3, seconds=9)) == "27:03:09"
    assert format_duration(timedelta(seconds=-5)) == "00:00:00"


def test_tracked_time_counts_open_log(task_factory):
    task = task_factory(work_logs=[_log("w1", "task-1", 5, 2), _log("w2", "task-1", 1)])
    assert tracked_time(task, NOW) == timedelta(hours=3)


def test_locked_task_does_not_accrue(task_factory):
    task = task_factory(status=TaskStatus.DONE, work_logs=[_log("w1", "task-1", 5, 2), _log("w2", "task-1", 1)])
    assert tracked_time(task, NOW) == timedelta(hours=2)


def test_analyze(task_factory):
    tasks = [
        task_factory("old-todo", status=TaskStatus.TODO, created_at=NOW - timedelta(days=8)),
        task_factory("new-todo", status=TaskStatus.TODO, created_at=NOW - timedelta(days=1), priority=TaskPriority.LOW),
        task_factory(
            "busy",
            status=TaskStatus.IN_PROGRESS,
            work_logs=[_log("w1", "busy", 10, 1.5), _log("w2", "busy", 1)],
        ),
        task_factory("c-early", status=TaskStatus.COMPLETED, work_logs=[_log("w3", "c-early", 48, 1)]),
        task_factory("c-late", status=TaskStatus.COMPLETED, work_logs=[_log("w4", "c-late", 5, 1)]),
        task_factory("c-none", status=TaskStatus.COMPLETED),
    ]
    report = analyze(tasks, NOW)

    assert report.total_tasks == 6
    assert report.total_hours == 3.5
    assert report.overdue_tasks == 1
    assert report.by_status[TaskStatus.COMPLETED] == 3
    assert report.by_status[TaskStatus.ON_HOLD] == 0
    assert list(report.by_status) == [
        TaskStatus.TODO,
        TaskStatus.IN_PROGRESS,
        TaskStatus.ON_HOLD,
        TaskStatus.DONE,
        TaskStatus.COMPLETED,
    ]
    assert report.by_priority[TaskPriority.LOW] == 1
    assert report.by_priority[TaskPriority.HIGH] == 5
    assert [t.id for t in report.recently_completed] == ["c-late", "c-early", "c-none"]


def test_recently_completed_is_capped(task_factory):
    tasks = [
        task_factory(f"c{i}", status=TaskStatus.COMPLETED, work_logs=[_log(f"w{i}", f"c{i}", i + 1, 0.5)])
        for i in range(7)
    ]
    assert [t.id for t in analyze(tasks, NOW).recently_completed] == ["c0", "c1", "c2", "c3", "c4"]
