"""
Unit tests for the buffered offline storage contract (in-memory backend)
and the persisted gating state built on it.
"""

import pytest

from src.adaptive.gating_state import PersistedGatingState
from src.adaptive.models import GATING_STATE_KEY
from src.storage import InMemoryStorage, ScoreRecord, build_storage


class TestBufferedWrites:
    def test_set_is_visible_before_save(self, storage):
        storage.set("key", [1, 2])
        assert storage.get("key") == [1, 2]
        assert storage.has_pending_changes
        assert storage.save_count == 0

    def test_save_flushes_once(self, storage):
        storage.set("a", 1)
        storage.set("b", 2)
        storage.save()
        storage.save()
        assert storage.save_count == 1
        assert not storage.has_pending_changes

    def test_values_are_copied(self, storage):
        value = ["c-05"]
        storage.set("key", value)
        value.append("c-10")
        read = storage.get("key")
        read.append("c-15")
        assert storage.get("key") == ["c-05"]

    def test_default_for_missing_key(self, storage):
        assert storage.get("missing") is None
        assert storage.get("missing", []) == []

    def test_clear(self):
        storage = InMemoryStorage({"a": 1})
        storage.set("b", 2)
        storage.clear()
        assert storage.keys() == []
        assert storage.get("a") is None

    def test_keys(self):
        storage = InMemoryStorage({"a": 1})
        storage.set("b", 2)
        assert storage.keys() == ["a", "b"]


class TestBoundedValues:
    def test_record_round_trip(self, storage):
        storage.set("score", 80, 0, 100)
        storage.save()
        assert storage.get("score") == 80
        assert storage.get_record("score") == ScoreRecord(value=80, minimum=0, maximum=100)

    def test_unbounded_value_has_no_record(self, storage):
        storage.set("score", 80)
        assert storage.get_record("score") is None

    @pytest.mark.parametrize(
        "record,expected",
        [
            (ScoreRecord(50, 0, 100), 0.5),
            (ScoreRecord(3, 0, 4), 0.75),
            (ScoreRecord(0, 0, 0), 0.0),
        ],
    )
    def test_scaled(self, record, expected):
        assert record.scaled == expected


class TestPersistedGatingState:
    def test_empty_by_default(self, storage):
        assert PersistedGatingState(storage).load() == []

    def test_add_keeps_order_and_deduplicates(self, storage):
        state = PersistedGatingState(storage)
        state.add(["c-10", "c-05"])
        assert state.add(["c-05", "c-15", "c-15"]) == ["c-10", "c-05", "c-15"]
        assert storage.get(GATING_STATE_KEY) == ["c-10", "c-05", "c-15"]
        assert storage.save_count == 2

    def test_malformed_value_ignored(self):
        storage = InMemoryStorage({GATING_STATE_KEY: "c-05"})
        assert PersistedGatingState(storage).load() == []


class TestBuildStorage:
    def test_memory_backend(self):
        from config import Settings

        settings = Settings(storage_backend="memory")
        assert isinstance(build_storage(settings), InMemoryStorage)
