"""
Entity tables: id-keyed access on top of the positional row store.

Callers work with logical ids and typed entities; positions and the
locator scan stay inside this module.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Mapping, Sequence, TypeVar

from pydantic import BaseModel

from taskboard_server.store.base import Collection, Row, RowStore
from taskboard_server.store.codec import CODECS, RowCodec, is_live, to_cell
from taskboard_server.store.locator import index_of, locate, locate_first

M = TypeVar("M", bound=BaseModel)


class EntityTable(Generic[M]):
    def __init__(self, store: RowStore, collection: Collection):
        self._store = store
        self.collection = collection
        self.codec: RowCodec[M] = CODECS[collection]

    async def rows(self) -> list[Row]:
        return await self._store.read_range(self.collection)

    def decode_rows(self, rows: Sequence[Row]) -> list[M]:
        return [self.codec.decode(row) for row in rows if is_live(row)]

    async def all(self) -> list[M]:
        return self.decode_rows(await self.rows())

    async def find(self, item_id: str) -> tuple[int, M]:
        """Return ``(position, entity)`` for ``item_id``."""
        rows = await self.rows()
        position = locate(item_id, rows, self.collection.value)
        return position, self.codec.decode(rows[index_of(position)])

    def first_position(
        self, rows: Sequence[Row], predicate: Callable[[M], bool]
    ) -> int | None:
        """Position of the first live row whose entity satisfies ``predicate``."""
        return locate_first(
            rows, lambda row: is_live(row) and predicate(self.codec.decode(row))
        )

    async def append(self, entity: M) -> None:
        await self._store.append(self.collection, self.codec.encode(entity))

    async def update_at(self, position: int, changes: Mapping[str, Any]) -> None:
        # One cell write per field; the store has no multi-cell transaction.
        for name, value in changes.items():
            await self._store.update_cell(
                self.collection, position, self.codec.column(name), to_cell(value)
            )

    async def clear_at(self, position: int) -> None:
        await self._store.clear_row(self.collection, position)
