"""
Offline Storage.

Persists learner state (gating decisions, diagnostic score, opt-in choice)
across sessions. Backends:
- memory: InMemoryStorage
- json: JsonFileStorage
- sql: SqlOfflineStorage (SQLAlchemy)
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from src.storage.base import (
    BufferedStorage,
    InMemoryStorage,
    OfflineStorage,
    ScoreRecord,
    StorageError,
    StoredValue,
)
from src.storage.json_store import JsonFileStorage
from src.storage.sql_store import SqlOfflineStorage

if TYPE_CHECKING:
    from config import Settings


def build_storage(settings: Settings) -> BufferedStorage:
    """Create the storage backend selected by settings."""
    if settings.storage_backend == "memory":
        return InMemoryStorage()
    if settings.storage_backend == "json":
        return JsonFileStorage(settings.storage_json_path, learner_id=settings.learner_id)
    return SqlOfflineStorage(settings.storage_url, learner_id=settings.learner_id)


__all__ = [
    "BufferedStorage",
    "InMemoryStorage",
    "JsonFileStorage",
    "OfflineStorage",
    "ScoreRecord",
    "SqlOfflineStorage",
    "StorageError",
    "StoredValue",
    "build_storage",
]
