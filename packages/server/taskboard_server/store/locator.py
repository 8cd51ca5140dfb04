"""
Row locator: identifier -> store position.

A plain linear scan over rows already in memory; the store has no index.
"""

from __future__ import annotations

from typing import Callable, Sequence

from taskboard_server.core.errors import NotFoundError

# read_range() starts below the header, and store rows are 1-based
HEADER_OFFSET = 2


def locate(item_id: str, rows: Sequence[Sequence[str]], collection: str = "Item") -> int:
    """Return the store position of the first row whose id cell is ``item_id``."""
    if item_id:
        for index, row in enumerate(rows):
            if row and row[0] == item_id:
                return index + HEADER_OFFSET
    raise NotFoundError(collection, item_id)


def locate_first(
    rows: Sequence[Sequence[str]], predicate: Callable[[Sequence[str]], bool]
) -> int | None:
    for index, row in enumerate(rows):
        if predicate(row):
            return index + HEADER_OFFSET
    return None


def index_of(position: int) -> int:
    return position - HEADER_OFFSET
