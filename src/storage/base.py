"""
Offline Storage Port.

Key/value persistence for learner state that must survive a resumed session.
Writes are buffered and only reach the backing store on an explicit save().

Design:
- OfflineStorage: Protocol the engine depends on
- StoredValue / ScoreRecord: what a key holds (bounded values carry min/max)
- BufferedStorage: shared write-buffer logic; backends implement _load/_flush/_clear
- InMemoryStorage: process-local backend (tests, dry runs)
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol


class StorageError(RuntimeError):
    """Backing store could not be read or written."""


@dataclass(frozen=True)
class StoredValue:
    """A value plus optional bounds (used by scores)."""

    value: Any
    minimum: float | None = None
    maximum: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "minimum": self.minimum, "maximum": self.maximum}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoredValue:
        return cls(
            value=data.get("value"),
            minimum=data.get("minimum"),
            maximum=data.get("maximum"),
        )


@dataclass(frozen=True)
class ScoreRecord:
    """A bounded numeric value read back from storage."""

    value: float
    minimum: float
    maximum: float

    @property
    def scaled(self) -> float:
        """Position of the value within its bounds (0-1)."""
        span = self.maximum - self.minimum
        if span <= 0:
            return 0.0
        return (self.value - self.minimum) / span


class OfflineStorage(Protocol):
    """What the gating engine needs from persistent storage."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(
        self,
        key: str,
        value: Any,
        minimum: float | None = None,
        maximum: float | None = None,
    ) -> None: ...

    def save(self) -> None: ...

    def clear(self) -> None: ...


class BufferedStorage(ABC):
    """
    Write-buffering storage base.

    `set` stages a value; `get` sees staged values first; `save` flushes
    staged values to the backend in one call. Values are deep-copied in both
    directions so callers never alias stored state.
    """

    def __init__(self) -> None:
        self._committed: dict[str, StoredValue] | None = None
        self._pending: dict[str, StoredValue] = {}

    # ------------------------------------------------------------------
    # Backend hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _load(self) -> dict[str, StoredValue]:
        """Read every committed key."""

    @abstractmethod
    def _flush(self, entries: dict[str, StoredValue]) -> None:
        """Persist staged entries (upsert)."""

    @abstractmethod
    def _clear(self) -> None:
        """Remove every committed key."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def committed(self) -> dict[str, StoredValue]:
        if self._committed is None:
            self._committed = self._load()
        return self._committed

    @property
    def has_pending_changes(self) -> bool:
        return bool(self._pending)

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entry(key)
        if entry is None:
            return default
        return copy.deepcopy(entry.value)

    def get_record(self, key: str) -> ScoreRecord | None:
        """Read a bounded value; None if the key is missing or unbounded."""
        entry = self._entry(key)
        if entry is None or entry.minimum is None or entry.maximum is None:
            return None
        return ScoreRecord(value=entry.value, minimum=entry.minimum, maximum=entry.maximum)

    def set(
        self,
        key: str,
        value: Any,
        minimum: float | None = None,
        maximum: float | None = None,
    ) -> None:
        self._pending[key] = StoredValue(copy.deepcopy(value), minimum, maximum)

    def save(self) -> None:
        if not self._pending:
            return
        staged = dict(self._pending)
        self._flush(staged)
        self.committed.update(staged)
        self._pending.clear()

    def clear(self) -> None:
        """Drop staged and committed values."""
        self._pending.clear()
        self._clear()
        self._committed = {}

    def keys(self) -> list[str]:
        return sorted(set(self.committed) | set(self._pending))

    def _entry(self, key: str) -> StoredValue | None:
        if key in self._pending:
            return self._pending[key]
        return self.committed.get(key)


class InMemoryStorage(BufferedStorage):
    """Process-local storage; counts flushes so callers can assert on writes."""

    def __init__(self, initial: dict[str, Any] | None = None):
        super().__init__()
        self._data: dict[str, StoredValue] = {
            key: StoredValue(copy.deepcopy(value)) for key, value in (initial or {}).items()
        }
        self.save_count = 0

    def _load(self) -> dict[str, StoredValue]:
        return dict(self._data)

    def _flush(self, entries: dict[str, StoredValue]) -> None:
        self._data.update(entries)
        self.save_count += 1

    def _clear(self) -> None:
        self._data.clear()
