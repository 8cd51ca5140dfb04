"""
Backing store contract.

The row store knows nothing about entities: it reads whole ranges, appends
rows at the logical end, writes single cells and blanks rows in place.
Positions are the store's native 1-based row numbers; row 1 of every
collection is a header.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, Sequence

Row = list[str]


class Collection(str, Enum):
    TASKS = "Tasks"
    USERS = "Users"
    REMARKS = "Remarks"
    WORK_LOGS = "WorkLogs"
    REPORTING = "Reporting"


class RowStore(Protocol):
    async def read_range(self, collection: Collection) -> list[Row]:
        """Return every data row below the header, tombstones included."""
        ...

    async def append(self, collection: Collection, row: Sequence[str]) -> None:
        ...

    async def update_cell(
        self, collection: Collection, position: int, column: int, value: str
    ) -> None:
        """Write one cell. ``column`` is 0-based, ``position`` is the 1-based row."""
        ...

    async def clear_row(self, collection: Collection, position: int) -> None:
        ...

    async def close(self) -> None:
        ...
