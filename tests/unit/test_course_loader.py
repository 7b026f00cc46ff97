"""
Unit tests for the course definition loader.
"""

import json

import pytest

from src.adaptive.models import PageStatus
from src.course.loader import (
    CourseDefinitionError,
    build_course,
    load_course,
    load_diagnostic_result,
    record_attempt,
)
from src.course.models import ContentKind


class TestBuildCourse:
    def test_tree_shape(self, course):
        tree = course.tree
        assert tree.course.id == "course"
        assert [p.id for p in tree.of_kind(ContentKind.PAGE)] == ["c-05", "c-10", "c-15", "a-diag", "c-final"]
        assert tree.parent(tree.find_by_id("q-05a")).id == "b-05"

    def test_adaptive_config(self, course):
        config = course.config
        assert config.is_enabled is True
        assert config.diagnostic_assessment_id == "diag"
        assert config.final_assessment_id == "final"
        assert config.set_page_status_as is PageStatus.UNAVAILABLE
        assert config.should_submit_score is True

    def test_block_topics(self, course):
        assert course.tree.find_by_id("b-05").adaptive_content.related_topics == ("c-05", "c-10")
        assert course.tree.find_by_id("b-20").adaptive_content is None

    def test_completion_criteria(self, course):
        assert course.criteria.require_content_completed is True
        assert course.criteria.require_assessment_completed is True

    def test_assessments_default_to_page_questions(self, course):
        diag = course.assessments.get("diag")
        assert diag.page_id == "a-diag"
        assert [q.id for q in diag.question_models] == ["q-05a", "q-05b", "q-10", "q-15", "q-20"]

    def test_explicit_question_ids(self, course_document):
        course_document["assessments"][0]["_questionIds"] = ["q-10"]
        course = build_course(course_document)
        assert [q.id for q in course.assessments.get("diag").question_models] == ["q-10"]

    def test_blank_final_assessment_is_none(self, course_document):
        course_document["course"]["_adaptiveContent"]["_finalAssessmentId"] = ""
        assert build_course(course_document).config.final_assessment_id is None


class TestInvalidCourses:
    def test_unknown_policy_rejected(self, course_document):
        course_document["course"]["_adaptiveContent"]["_setPageStatusAs"] = "hidden"
        with pytest.raises(CourseDefinitionError):
            build_course(course_document)

    def test_dangling_parent_rejected(self, course_document):
        course_document["blocks"].append({"_id": "b-x", "_parentId": "nowhere"})
        with pytest.raises(CourseDefinitionError, match="_parentId"):
            build_course(course_document)

    def test_duplicate_id_rejected(self, course_document):
        course_document["components"].append({"_id": "q-10", "_parentId": "b-10"})
        with pytest.raises(CourseDefinitionError, match="Duplicate"):
            build_course(course_document)

    def test_assessment_on_unknown_page_rejected(self, course_document):
        course_document["assessments"][1]["_pageId"] = "missing"
        with pytest.raises(CourseDefinitionError, match="unknown page"):
            build_course(course_document)

    def test_missing_course_rejected(self):
        with pytest.raises(CourseDefinitionError):
            build_course({"contentObjects": []})


class TestFiles:
    def test_load_course_from_file(self, tmp_path, course_document):
        path = tmp_path / "course.json"
        path.write_text(json.dumps(course_document), encoding="utf-8")

        course = load_course(path)

        assert len(course.tree) == 23

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_course(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "course.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CourseDefinitionError, match="not valid JSON"):
            load_course(path)

    def test_load_diagnostic_result(self, tmp_path):
        path = tmp_path / "result.json"
        path.write_text(
            json.dumps({"assessmentId": "diag", "isPass": True, "questions": {"q-10": True}}),
            encoding="utf-8",
        )
        result = load_diagnostic_result(path)
        assert result.assessment_id == "diag"
        assert result.questions == {"q-10": True}


class TestRecordAttempt:
    def test_sets_question_state_and_presented_set(self, course, result_factory):
        state = record_attempt(course, result_factory({"q-10": True, "q-15": False}, is_pass=False))

        assert [q.id for q in state.question_models] == ["q-10", "q-15"]
        assert course.tree.find_by_id("q-10").is_correct is True
        assert course.tree.find_by_id("q-15").is_correct is False
        assert course.tree.find_by_id("q-15").is_interaction_complete is True
        assert state.is_pass is False
        assert state.is_complete is True

    def test_unknown_question_rejected(self, course, result_factory):
        with pytest.raises(CourseDefinitionError):
            record_attempt(course, result_factory({"t-c05": True}))

    def test_unknown_assessment_rejected(self, course, result_factory):
        with pytest.raises(CourseDefinitionError):
            record_attempt(course, result_factory({"q-10": True}, assessmentId="nope"))
