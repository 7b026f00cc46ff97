"""
JSON-file offline storage.

All learners share one JSON document, keyed by learner id:

    {"learner-1": {"adaptiveContent": {"value": ["c-05"], "minimum": null, "maximum": null}}}

A corrupt file is logged and treated as empty so a course stays usable.
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from src.storage.base import BufferedStorage, StorageError, StoredValue


class JsonFileStorage(BufferedStorage):
    """Offline storage persisted to a JSON file."""

    def __init__(self, path: Path, learner_id: str = "default"):
        super().__init__()
        self.path = Path(path)
        self.learner_id = learner_id

    def _read_document(self) -> dict:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable offline storage file {self.path}: {e}")
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read offline storage file {self.path}: {e}") from e

        if not isinstance(document, dict):
            logger.warning(f"Ignoring offline storage file {self.path}: top level is not an object")
            return {}
        return document

    def _write_document(self, document: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
        except OSError as e:
            raise StorageError(f"Cannot write offline storage file {self.path}: {e}") from e

    def _load(self) -> dict[str, StoredValue]:
        learner = self._read_document().get(self.learner_id) or {}
        entries = {}
        for key, data in learner.items():
            if not isinstance(data, dict):
                logger.warning(f"Skipping malformed offline storage entry {key!r}")
                continue
            entries[key] = StoredValue.from_dict(data)
        return entries

    def _flush(self, entries: dict[str, StoredValue]) -> None:
        document = self._read_document()
        learner = document.setdefault(self.learner_id, {})
        for key, entry in entries.items():
            learner[key] = entry.to_dict()
        self._write_document(document)
        logger.debug(f"Saved {sorted(entries)} for {self.learner_id} to {self.path}")

    def _clear(self) -> None:
        document = self._read_document()
        if document.pop(self.learner_id, None) is not None:
            self._write_document(document)
