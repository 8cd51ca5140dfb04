"""
Row codec: positional cell lists <-> typed entities.

Each collection has a fixed column order. Decoding is positional and strict:
a missing cell for a required column raises ``MalformedRowError``. Optional
columns are trailing and decode an absent or empty cell to their default, so
``""`` and ``None`` are both valid encodings of "absent" there.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Generic, Mapping, Sequence, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from taskboard_shared.schemas.tasks import Remark, Task, WorkLog
from taskboard_shared.schemas.users import ReportingEdge, User

from taskboard_server.core.errors import MalformedRowError
from taskboard_server.store.base import Collection, Row

M = TypeVar("M", bound=BaseModel)


def to_cell(value: Any) -> str:
    """Render a single field value the way it is stored in a cell."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class RowCodec(Generic[M]):
    def __init__(
        self,
        model: type[M],
        fields: Sequence[str],
        optional: Mapping[str, Any] | None = None,
    ):
        self.model = model
        self.fields = tuple(fields)
        self._optional = dict(optional or {})

    @property
    def arity(self) -> int:
        return len(self.fields)

    @property
    def header(self) -> Row:
        return [to_camel(name) for name in self.fields]

    def column(self, field: str) -> int:
        try:
            return self.fields.index(field)
        except ValueError:
            raise ValueError(f"{self.model.__name__} has no stored field '{field}'") from None

    def decode(self, row: Sequence[str]) -> M:
        values: dict[str, Any] = {}
        for index, name in enumerate(self.fields):
            cell = row[index] if index < len(row) else None
            if name in self._optional:
                values[name] = self._optional[name] if cell in (None, "") else cell
            elif cell is None:
                raise MalformedRowError(
                    f"{self.model.__name__} row has {len(row)} of {self.arity} cells; "
                    f"missing '{name}'"
                )
            else:
                values[name] = cell
        try:
            return self.model.model_validate(values)
        except ValidationError as exc:
            raise MalformedRowError(
                f"{self.model.__name__} row {list(row)!r} is invalid: "
                f"{exc.error_count()} error(s)"
            ) from exc

    def encode(self, entity: M) -> Row:
        return [to_cell(getattr(entity, name)) for name in self.fields]


TASK_CODEC = RowCodec(
    Task,
    ("id", "title", "description", "status", "priority", "created_at", "assignee_id", "version"),
    optional={"version": 0},
)
USER_CODEC = RowCodec(User, ("id", "username", "password", "name", "role"))
REMARK_CODEC = RowCodec(Remark, ("id", "task_id", "text", "created_at"))
WORK_LOG_CODEC = RowCodec(
    WorkLog,
    ("id", "task_id", "start_time", "end_time"),
    optional={"end_time": None},
)
REPORTING_CODEC = RowCodec(ReportingEdge, ("id", "user_id", "report_to_user_id"))

CODECS: dict[Collection, RowCodec] = {
    Collection.TASKS: TASK_CODEC,
    Collection.USERS: USER_CODEC,
    Collection.REMARKS: REMARK_CODEC,
    Collection.WORK_LOGS: WORK_LOG_CODEC,
    Collection.REPORTING: REPORTING_CODEC,
}


def width(collection: Collection) -> int:
    return CODECS[collection].arity


def header(collection: Collection) -> Row:
    return CODECS[collection].header


def is_live(row: Sequence[str]) -> bool:
    """Cleared rows stay in place as tombstones with an empty id cell."""
    return bool(row) and row[0] != ""
