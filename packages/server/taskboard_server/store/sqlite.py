"""
SQLite-backed row store for single-node deployments.

Emulates the spreadsheet layout: one table keyed by (collection, position),
cells stored as a JSON array, a header row seeded at position 1.
"""

from __future__ import annotations

import asyncio
import json
import os
import sqlite3
from typing import Sequence

import aiosqlite
import structlog

from taskboard_server.core.errors import StoreUnavailableError
from taskboard_server.store.base import Collection, Row
from taskboard_server.store.codec import header

log = structlog.get_logger()

_SCHEMA = """
CREATE TABLE IF NOT EXISTS rows (
    collection TEXT NOT NULL,
    position   INTEGER NOT NULL,
    cells      TEXT NOT NULL,
    PRIMARY KEY (collection, position)
);
"""


class SqliteRowStore:
    """Async SQLite row store. Opens lazily on first use."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None
        self._open_lock = asyncio.Lock()

    async def open(self) -> None:
        async with self._open_lock:
            if self._db is not None:
                return
            try:
                os.makedirs(os.path.dirname(self._db_path) or ".", exist_ok=True)
                db = await aiosqlite.connect(self._db_path)
                await db.executescript(_SCHEMA)
                for collection in Collection:
                    await db.execute(
                        "INSERT OR IGNORE INTO rows (collection, position, cells) VALUES (?, 1, ?)",
                        (collection.value, json.dumps(header(collection))),
                    )
                await db.commit()
            except (OSError, sqlite3.Error) as exc:
                raise StoreUnavailableError(f"Cannot open row store at {self._db_path}: {exc}") from exc
            self._db = db
            log.info("store.opened", backend="sqlite", path=self._db_path)

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            await self.open()
        assert self._db
        return self._db

    async def read_range(self, collection: Collection) -> list[Row]:
        db = await self._conn()
        try:
            cursor = await db.execute(
                "SELECT position, cells FROM rows WHERE collection = ? AND position > 1 "
                "ORDER BY position",
                (collection.value,),
            )
            records = await cursor.fetchall()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Read failed on {collection.value}: {exc}") from exc

        rows: list[Row] = []
        for position, cells in records:
            # Positions written past the end leave gaps; keep indices aligned.
            while len(rows) < position - 2:
                rows.append([])
            rows.append(json.loads(cells))
        return rows

    async def append(self, collection: Collection, row: Sequence[str]) -> None:
        db = await self._conn()
        try:
            await db.execute(
                "INSERT INTO rows (collection, position, cells) "
                "SELECT ?, COALESCE(MAX(position), 1) + 1, ? FROM rows WHERE collection = ?",
                (collection.value, json.dumps(list(row)), collection.value),
            )
            await db.commit()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Append failed on {collection.value}: {exc}") from exc

    async def update_cell(
        self, collection: Collection, position: int, column: int, value: str
    ) -> None:
        db = await self._conn()
        try:
            cursor = await db.execute(
                "SELECT cells FROM rows WHERE collection = ? AND position = ?",
                (collection.value, position),
            )
            record = await cursor.fetchone()
            cells = json.loads(record[0]) if record else []
            if len(cells) <= column:
                cells.extend([""] * (column + 1 - len(cells)))
            cells[column] = value
            await db.execute(
                "INSERT INTO rows (collection, position, cells) VALUES (?, ?, ?) "
                "ON CONFLICT(collection, position) DO UPDATE SET cells = excluded.cells",
                (collection.value, position, json.dumps(cells)),
            )
            await db.commit()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Update failed on {collection.value}: {exc}") from exc

    async def clear_row(self, collection: Collection, position: int) -> None:
        db = await self._conn()
        try:
            await db.execute(
                "UPDATE rows SET cells = '[]' WHERE collection = ? AND position = ?",
                (collection.value, position),
            )
            await db.commit()
        except sqlite3.Error as exc:
            raise StoreUnavailableError(f"Clear failed on {collection.value}: {exc}") from exc
