"""In-process row store used for tests and throwaway dev servers."""

from __future__ import annotations

from typing import Sequence

from taskboard_server.core.errors import StoreUnavailableError
from taskboard_server.store.base import Collection, Row
from taskboard_server.store.codec import header


class MemoryRowStore:
    """
    Positional rows held in plain lists, header at position 1.

    Set ``available = False`` to simulate an outage: every operation then
    raises ``StoreUnavailableError``.
    """

    def __init__(self, seed: dict[Collection, Sequence[Row]] | None = None):
        self._rows: dict[Collection, list[Row]] = {c: [header(c)] for c in Collection}
        for collection, rows in (seed or {}).items():
            self._rows[collection].extend(list(row) for row in rows)
        self.available = True
        self.writes = 0

    def _check(self, op: str, collection: Collection) -> None:
        if not self.available:
            raise StoreUnavailableError(f"Row store unavailable ({op} {collection.value})")

    def _row_at(self, collection: Collection, position: int) -> Row:
        rows = self._rows[collection]
        if position < 2:
            raise ValueError(f"Position {position} is the header or out of range")
        while len(rows) < position:
            rows.append([])
        return rows[position - 1]

    async def read_range(self, collection: Collection) -> list[Row]:
        self._check("read", collection)
        return [list(row) for row in self._rows[collection][1:]]

    async def append(self, collection: Collection, row: Sequence[str]) -> None:
        self._check("append", collection)
        self._rows[collection].append(list(row))
        self.writes += 1

    async def update_cell(
        self, collection: Collection, position: int, column: int, value: str
    ) -> None:
        self._check("update", collection)
        row = self._row_at(collection, position)
        if len(row) <= column:
            row.extend([""] * (column + 1 - len(row)))
        row[column] = value
        self.writes += 1

    async def clear_row(self, collection: Collection, position: int) -> None:
        self._check("clear", collection)
        self._row_at(collection, position).clear()
        self.writes += 1

    async def close(self) -> None:
        return
