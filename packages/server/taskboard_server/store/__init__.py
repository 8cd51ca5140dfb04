"""Backing row stores and the id-keyed tables built on them."""

from taskboard_server.core.config import Settings
from taskboard_server.store.base import Collection, RowStore
from taskboard_server.store.memory import MemoryRowStore
from taskboard_server.store.sheets import SheetsRowStore
from taskboard_server.store.sqlite import SqliteRowStore


def build_store(settings: Settings) -> RowStore:
    """Create the row store selected by ``settings.store_backend``."""
    if settings.store_backend == "memory":
        return MemoryRowStore()
    if settings.store_backend == "sheets":
        if not settings.sheet_id:
            raise ValueError("TB_SHEET_ID is required for the sheets backend")
        return SheetsRowStore.from_service_account(
            settings.sheet_id,
            settings.service_account_email,
            settings.service_account_private_key,
            request_timeout=settings.store_timeout_seconds,
        )
    return SqliteRowStore(settings.sqlite_path)


__all__ = [
    "Collection",
    "MemoryRowStore",
    "RowStore",
    "SheetsRowStore",
    "SqliteRowStore",
    "build_store",
]
