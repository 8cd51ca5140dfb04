from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    ON_HOLD = "On Hold"
    DONE = "Done"
    COMPLETED = "Completed"


# Board column order
TASK_STATUS_ORDER: list["TaskStatus"] = [
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.ON_HOLD,
    TaskStatus.DONE,
    TaskStatus.COMPLETED,
]

LOCKED_STATUSES = frozenset({TaskStatus.DONE, TaskStatus.COMPLETED})


def is_locked(status: "TaskStatus") -> bool:
    """Done and Completed are terminal: the task accepts no further mutation."""
    return status in LOCKED_STATUSES


class TaskPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class UserRole(str, Enum):
    ADMIN = "Admin"
    USER = "User"


class WireModel(BaseModel):
    """Base for everything that crosses the HTTP boundary (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
