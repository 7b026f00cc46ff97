"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import copy
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.course.loader import build_course  # noqa: E402
from src.course.schemas import DiagnosticResultDocument  # noqa: E402
from src.storage import InMemoryStorage  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (real storage backends)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# ============================================================================
# Sample course
# ============================================================================
#
# course
# ├── c-05      (topic page)         b-c05 -> t-c05
# ├── c-10      (topic page)         b-c10 -> t-c10
# ├── c-15      (not evidenced)      b-c15 -> t-c15
# ├── a-diag    (diagnostic page)
# │     b-05  topics [c-05, c-10]    q-05a, q-05b
# │     b-10  topics [c-05]          q-10
# │     b-15  topics [c-10]          q-15
# │     b-20  no topics              q-20
# └── c-final   (final assessment)   b-final -> fq-1

SAMPLE_COURSE = {
    "course": {
        "_id": "course",
        "title": "Networking Fundamentals",
        "_adaptiveContent": {
            "_isEnabled": True,
            "_diagnosticAssessmentId": "diag",
            "_finalAssessmentId": "final",
            "_setPageStatusAs": "unavailable",
            "_shouldSubmitScore": True,
            "_optInPageId": "a-diag",
            "_optOutPageId": "c-05",
        },
        "_completionCriteria": {
            "_requireContentCompleted": True,
            "_requireAssessmentCompleted": True,
        },
    },
    "contentObjects": [
        {"_id": "c-05", "_parentId": "course", "title": "Addressing"},
        {"_id": "c-10", "_parentId": "course", "title": "Routing"},
        {"_id": "c-15", "_parentId": "course", "title": "Switching"},
        {"_id": "a-diag", "_parentId": "course", "title": "Diagnostic", "_isOptional": True},
        {"_id": "c-final", "_parentId": "course", "title": "Final assessment"},
    ],
    "blocks": [
        {"_id": "b-c05", "_parentId": "c-05"},
        {"_id": "b-c10", "_parentId": "c-10"},
        {"_id": "b-c15", "_parentId": "c-15"},
        {"_id": "b-05", "_parentId": "a-diag", "_adaptiveContent": {"_relatedTopics": ["c-05", "c-10"]}},
        {"_id": "b-10", "_parentId": "a-diag", "_adaptiveContent": {"_relatedTopics": ["c-05"]}},
        {"_id": "b-15", "_parentId": "a-diag", "_adaptiveContent": {"_relatedTopics": ["c-10"]}},
        {"_id": "b-20", "_parentId": "a-diag"},
        {"_id": "b-final", "_parentId": "c-final"},
    ],
    "components": [
        {"_id": "t-c05", "_parentId": "b-c05"},
        {"_id": "t-c10", "_parentId": "b-c10"},
        {"_id": "t-c15", "_parentId": "b-c15"},
        {"_id": "q-05a", "_parentId": "b-05", "_isQuestionType": True},
        {"_id": "q-05b", "_parentId": "b-05", "_isQuestionType": True},
        {"_id": "q-10", "_parentId": "b-10", "_isQuestionType": True},
        {"_id": "q-15", "_parentId": "b-15", "_isQuestionType": True},
        {"_id": "q-20", "_parentId": "b-20", "_isQuestionType": True},
        {"_id": "fq-1", "_parentId": "b-final", "_isQuestionType": True},
    ],
    "assessments": [
        {"_id": "diag", "_pageId": "a-diag"},
        {"_id": "final", "_pageId": "c-final"},
    ],
}

ALL_QUESTIONS = ["q-05a", "q-05b", "q-10", "q-15", "q-20"]


@pytest.fixture
def course_document():
    """A fresh, mutable copy of the sample course definition."""
    return copy.deepcopy(SAMPLE_COURSE)


@pytest.fixture
def course(course_document):
    """The sample course, loaded."""
    return build_course(course_document)


@pytest.fixture
def storage():
    """Empty in-memory offline storage."""
    return InMemoryStorage()


def make_result(answers: dict[str, bool], is_pass: bool = True, **overrides) -> DiagnosticResultDocument:
    """Build a recorded diagnostic attempt for the sample course."""
    data = {
        "assessmentId": "diag",
        "isPass": is_pass,
        "score": sum(answers.values()),
        "maxScore": len(answers),
        "isPercentageBased": True,
        "scoreAsPercent": round(100 * sum(answers.values()) / max(len(answers), 1)),
        "questions": answers,
    }
    data.update(overrides)
    return DiagnosticResultDocument.model_validate(data)


@pytest.fixture
def result_factory():
    return make_result
