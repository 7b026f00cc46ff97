"""
End-to-end gating flow across two sessions backed by real storage.

Session 1 takes the diagnostic; session 2 reloads the course from scratch and
must come back to the same gated state without re-running the diagnostic.
"""

import copy

import pytest

from src.adaptive import GATING_STATE_KEY, SCORE_KEY, AdaptiveContentEngine
from src.core.events import ASSESSMENT_COMPLETE, COURSE_START, EventBus
from src.course.loader import build_course, record_attempt
from src.storage import JsonFileStorage, SqlOfflineStorage


@pytest.fixture(params=["json", "sql"])
def open_storage(request, tmp_path):
    if request.param == "json":
        return lambda: JsonFileStorage(tmp_path / "store.json", learner_id="learner-1")
    return lambda: SqlOfflineStorage(f"sqlite:///{tmp_path / 'store.db'}", learner_id="learner-1")


def _session(document, storage):
    course = build_course(copy.deepcopy(document))
    engine = AdaptiveContentEngine.for_course(course, storage, bus=EventBus())
    engine.attach()
    engine.bus.trigger(COURSE_START)
    return course, engine


class TestTwoSessions:
    def test_passed_diagnostic_is_restored(self, open_storage, course_document, result_factory):
        course, engine = _session(course_document, open_storage())
        state = record_attempt(
            course, result_factory({"q-05a": True, "q-05b": True, "q-10": True, "q-15": False})
        )
        engine.bus.trigger(ASSESSMENT_COMPLETE, state)

        assert engine.last_outcome.masterable_topics == ["c-05"]

        storage = open_storage()
        assert storage.get(GATING_STATE_KEY) == ["c-05", "c-final"]
        assert storage.get_record(SCORE_KEY) is not None

        course, engine = _session(course_document, storage)

        assert course.tree.find_by_id("c-05").is_available is False
        assert course.tree.find_by_id("c-10").is_available is True
        assert course.tree.find_by_id("c-final").is_available is False
        assert engine.criteria.require_assessment_completed is False
        assert engine.bus.listeners(ASSESSMENT_COMPLETE) == []
        assert not storage.has_pending_changes
        assert open_storage().get(GATING_STATE_KEY) == ["c-05", "c-final"]

    def test_failed_diagnostic_keeps_final_assessment(self, open_storage, course_document, result_factory):
        course, engine = _session(course_document, open_storage())
        state = record_attempt(
            course, result_factory({"q-05a": True, "q-05b": True, "q-10": True}, is_pass=False)
        )
        engine.bus.trigger(ASSESSMENT_COMPLETE, state)

        course, engine = _session(course_document, open_storage())

        assert course.tree.find_by_id("c-05").is_available is False
        assert course.tree.find_by_id("c-final").is_available is True
        assert engine.criteria.require_assessment_completed is True
        assert open_storage().get(SCORE_KEY) is None

    def test_complete_policy_restored(self, open_storage, course_document, result_factory):
        document = course_document
        document["course"]["_adaptiveContent"]["_setPageStatusAs"] = "complete"

        course, engine = _session(document, open_storage())
        state = record_attempt(course, result_factory({"q-05a": True, "q-05b": True}))
        engine.bus.trigger(ASSESSMENT_COMPLETE, state)

        course, engine = _session(document, open_storage())

        for page_id in ("c-05", "c-10"):
            page = course.tree.find_by_id(page_id)
            assert page.is_complete is True
            assert page.css_classes == "diag-complete"
        assert course.tree.find_by_id("c-final").is_available is True
