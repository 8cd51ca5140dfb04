"""
Row codec tests: positional decoding, defaults for trailing optional cells,
and the encode/decode round trip.
"""

from datetime import datetime, timezone

import pytest

from taskboard_server.core.errors import MalformedRowError
from taskboard_server.store.base import Collection
from taskboard_server.store.codec import (
    REMARK_CODEC,
    REPORTING_CODEC,
    TASK_CODEC,
    USER_CODEC,
    WORK_LOG_CODEC,
    header,
    is_live,
    to_cell,
    width,
)
from taskboard_shared.schemas.common import TaskPriority, TaskStatus, UserRole
from taskboard_shared.schemas.tasks import Remark, Task, WorkLog
from taskboard_shared.schemas.users import ReportingEdge, User

CREATED = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

TASK_ROW = [
    "task-1", "Write proposal", "First draft", "In Progress", "High",
    "2024-03-01T09:00:00+00:00", "u-1",
]


class TestTaskCodec:
    def test_decode_seven_cell_row(self):
        """Rows written before the version column existed decode with version 0."""
        task = TASK_CODEC.decode(TASK_ROW)
        assert task.id == "task-1"
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.priority == TaskPriority.HIGH
        assert task.created_at == CREATED
        assert task.assignee_id == "u-1"
        assert task.version == 0
        assert task.remarks == []
        assert task.work_logs == []

    def test_decode_version_cell(self):
        assert TASK_CODEC.decode([*TASK_ROW, "4"]).version == 4

    def test_missing_required_cell_is_malformed(self):
        with pytest.raises(MalformedRowError, match="assignee_id"):
            TASK_CODEC.decode(TASK_ROW[:6])

    def test_invalid_status_is_malformed(self):
        row = list(TASK_ROW)
        row[3] = "Someday"
        with pytest.raises(MalformedRowError):
            TASK_CODEC.decode(row)

    def test_encode_is_positional(self):
        task = Task(
            id="task-1",
            title="Write proposal",
            description="First draft",
            status=TaskStatus.IN_PROGRESS,
            priority=TaskPriority.HIGH,
            created_at=CREATED,
            assignee_id="u-1",
            version=2,
        )
        assert TASK_CODEC.encode(task) == [*TASK_ROW, "2"]

    def test_round_trip(self):
        task = TASK_CODEC.decode([*TASK_ROW, "3"])
        assert TASK_CODEC.decode(TASK_CODEC.encode(task)) == task


class TestWorkLogCodec:
    def test_absent_end_time_decodes_to_none(self):
        wl = WORK_LOG_CODEC.decode(["wl-1", "task-1", "2024-03-01T09:00:00+00:00"])
        assert wl.end_time is None
        assert wl.running

    def test_empty_end_time_decodes_to_none(self):
        wl = WORK_LOG_CODEC.decode(["wl-1", "task-1", "2024-03-01T09:00:00+00:00", ""])
        assert wl.end_time is None

    def test_running_log_encodes_empty_cell(self):
        """None and "" are both valid encodings of a missing end time."""
        wl = WorkLog(id="wl-1", task_id="task-1", start_time=CREATED)
        row = WORK_LOG_CODEC.encode(wl)
        assert row[3] == ""
        assert WORK_LOG_CODEC.decode(row) == wl

    def test_closed_log_round_trip(self):
        wl = WorkLog(
            id="wl-1",
            task_id="task-1",
            start_time=CREATED,
            end_time=datetime(2024, 3, 1, 10, 30, tzinfo=timezone.utc),
        )
        assert WORK_LOG_CODEC.decode(WORK_LOG_CODEC.encode(wl)) == wl

    def test_missing_start_time_is_malformed(self):
        with pytest.raises(MalformedRowError):
            WORK_LOG_CODEC.decode(["wl-1", "task-1"])


class TestOtherCodecs:
    def test_user_round_trip(self):
        user = User(id="u-1", username="ada", password="pw", name="Ada", role=UserRole.ADMIN)
        row = USER_CODEC.encode(user)
        assert row == ["u-1", "ada", "pw", "Ada", "Admin"]
        assert USER_CODEC.decode(row) == user

    def test_remark_round_trip(self):
        remark = Remark(id="rem-1", task_id="task-1", text="looks good", created_at=CREATED)
        assert REMARK_CODEC.decode(REMARK_CODEC.encode(remark)) == remark

    def test_reporting_round_trip(self):
        edge = ReportingEdge(id="rep-1", user_id="u-2", report_to_user_id="u-1")
        assert REPORTING_CODEC.decode(REPORTING_CODEC.encode(edge)) == edge

    def test_short_user_row_is_malformed(self):
        with pytest.raises(MalformedRowError):
            USER_CODEC.decode(["u-1", "ada", "pw", "Ada"])


class TestHelpers:
    def test_widths(self):
        assert width(Collection.TASKS) == 8
        assert width(Collection.USERS) == 5
        assert width(Collection.REMARKS) == 4
        assert width(Collection.WORK_LOGS) == 4
        assert width(Collection.REPORTING) == 3

    def test_header_is_camel_case(self):
        assert header(Collection.WORK_LOGS) == ["id", "taskId", "startTime", "endTime"]

    def test_to_cell(self):
        assert to_cell(None) == ""
        assert to_cell(TaskStatus.ON_HOLD) == "On Hold"
        assert to_cell(CREATED) == "2024-03-01T09:00:00+00:00"
        assert to_cell(3) == "3"

    def test_tombstones_are_not_live(self):
        assert not is_live([])
        assert not is_live(["", "", ""])
        assert is_live(["task-1"])
