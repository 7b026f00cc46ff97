"""
Persisted gating state: the ordered set of content ids already gated.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from src.adaptive.models import GATING_STATE_KEY
from src.storage.base import OfflineStorage, StorageError


class PersistedGatingState:
    """Read/append view over the `adaptiveContent` storage key."""

    def __init__(self, storage: OfflineStorage):
        self._storage = storage

    def load(self) -> list[str]:
        """Persisted ids in insertion order (empty when nothing was gated yet)."""
        stored = self._storage.get(GATING_STATE_KEY)
        if not stored:
            return []
        if not isinstance(stored, list):
            logger.warning(f"Ignoring malformed {GATING_STATE_KEY!r} value: {stored!r}")
            return []
        return [str(content_id) for content_id in stored]

    def add(self, content_ids: Iterable[str]) -> list[str]:
        """
        Append ids not already recorded, then flush the store.

        Returns:
            The full persisted list after the write
        """
        persisted = self.load()
        for content_id in content_ids:
            if content_id in persisted:
                continue
            persisted.append(content_id)

        logger.debug(f"Persisting gating state: {persisted}")
        self._storage.set(GATING_STATE_KEY, persisted)
        try:
            self._storage.save()
        except StorageError as e:
            # The ids stay staged; a later successful save() writes them
            logger.error(f"Could not persist gating state: {e}")
        return persisted
