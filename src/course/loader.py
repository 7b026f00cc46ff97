"""
src/course/loader.py

Loads a course definition JSON file into a CourseTree and AssessmentRegistry,
and replays recorded diagnostic attempts onto a loaded course.

No storage access. Pure file I/O + validation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from src.adaptive.models import AdaptiveContentConfig
from src.assessment.state import AssessmentRegistry, AssessmentState
from src.course.models import (
    BlockAdaptiveConfig,
    CompletionCriteria,
    ContentKind,
    ContentNode,
    CourseTree,
)
from src.course.schemas import (
    ContentObjectDefinition,
    CourseDocument,
    DiagnosticResultDocument,
)


class CourseDefinitionError(ValueError):
    """The course file (or a result file) does not describe a usable course."""


@dataclass
class LoadedCourse:
    tree: CourseTree
    assessments: AssessmentRegistry
    config: AdaptiveContentConfig | None
    criteria: CompletionCriteria


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_course(path: Path | str) -> LoadedCourse:
    """Load and validate a course definition file.

    Raises:
        FileNotFoundError: If the file does not exist.
        CourseDefinitionError: If the JSON or its structure is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Course definition not found: {path}")

    raw = _read_json(path)
    course = build_course(raw, source=str(path))
    logger.info(f"Loaded course {course.tree.course.id} ({len(course.tree)} content objects) from {path}")
    return course


def build_course(raw: object, source: str = "<memory>") -> LoadedCourse:
    """Build a LoadedCourse from an already-parsed course document."""
    try:
        document = CourseDocument.model_validate(raw)
    except ValidationError as e:
        raise CourseDefinitionError(f"[{source}] invalid course definition: {e}") from e

    tree = CourseTree()
    criteria_config = document.course.completion_criteria
    criteria = CompletionCriteria(
        require_content_completed=criteria_config.require_content_completed,
        require_assessment_completed=criteria_config.require_assessment_completed,
    )

    try:
        tree.add(ContentNode(id=document.course.id, kind=ContentKind.COURSE, title=document.course.title))
        for page in document.content_objects:
            _add_child(tree, page, ContentKind.PAGE)
        for block in document.blocks:
            node = _add_child(tree, block, ContentKind.BLOCK)
            if block.adaptive_content is not None:
                node.adaptive_content = BlockAdaptiveConfig(
                    related_topics=tuple(block.adaptive_content.related_topics)
                )
        for component in document.components:
            node = _add_child(tree, component, ContentKind.COMPONENT)
            node.is_question_type = component.is_question_type
            node.is_correct = component.is_correct
            node.is_interaction_complete = component.is_interaction_complete
    except ValueError as e:
        raise CourseDefinitionError(f"[{source}] {e}") from e

    assessments = AssessmentRegistry()
    for definition in document.assessments:
        page = tree.find_by_id(definition.page_id)
        if page is None:
            raise CourseDefinitionError(
                f"[{source}] assessment {definition.id!r} refers to unknown page {definition.page_id!r}"
            )
        if definition.id in assessments:
            raise CourseDefinitionError(f"[{source}] duplicate assessment id {definition.id!r}")
        assessments.register(
            AssessmentState(
                id=definition.id,
                page_id=definition.page_id,
                is_percentage_based=definition.is_percentage_based,
                question_models=_resolve_questions(tree, page, definition.question_ids, source),
            )
        )

    return LoadedCourse(
        tree=tree,
        assessments=assessments,
        config=document.course.adaptive_content,
        criteria=criteria,
    )


def load_diagnostic_result(path: Path | str) -> DiagnosticResultDocument:
    """Load a recorded diagnostic attempt file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Diagnostic result not found: {path}")
    try:
        return DiagnosticResultDocument.model_validate(_read_json(path))
    except ValidationError as e:
        raise CourseDefinitionError(f"[{path}] invalid diagnostic result: {e}") from e


def record_attempt(course: LoadedCourse, result: DiagnosticResultDocument) -> AssessmentState:
    """Write a recorded attempt onto the course and return the updated assessment state.

    Only the listed questions count as presented in this attempt.

    Raises:
        CourseDefinitionError: If the assessment or a question id is unknown.
    """
    state = course.assessments.get(result.assessment_id)
    if state is None:
        raise CourseDefinitionError(f"Unknown assessment id {result.assessment_id!r}")

    presented = []
    for question_id, is_correct in result.questions.items():
        question = course.tree.find_by_id(question_id)
        if question is None or not question.is_question_type:
            raise CourseDefinitionError(f"{question_id!r} is not a question component")
        course.tree.set(
            question,
            is_correct=is_correct,
            is_complete=True,
            is_interaction_complete=True,
        )
        presented.append(question)

    state.question_models = presented
    state.is_pass = result.is_pass
    state.is_complete = True
    state.score = result.score
    state.max_score = result.max_score
    state.is_percentage_based = result.is_percentage_based
    state.score_as_percent = result.score_as_percent
    return state


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _read_json(path: Path) -> object:
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)
    except json.JSONDecodeError as e:
        raise CourseDefinitionError(f"[{path}] is not valid JSON: {e}") from e


def _add_child(
    tree: CourseTree, definition: ContentObjectDefinition, kind: ContentKind
) -> ContentNode:
    if definition.parent_id not in tree:
        raise ValueError(
            f"{kind.value} {definition.id!r} has unknown _parentId {definition.parent_id!r}"
        )
    node = tree.add(
        ContentNode(
            id=definition.id,
            kind=kind,
            parent_id=definition.parent_id,
            title=definition.title,
            is_available=definition.is_available,
            is_optional=definition.is_optional,
            is_complete=definition.is_complete,
            is_locked=definition.is_locked,
            classes=set(definition.classes.split()),
        )
    )
    return node


def _resolve_questions(
    tree: CourseTree, page: ContentNode, question_ids: list[str], source: str
) -> list[ContentNode]:
    """Explicit question ids, or every question component on the page."""
    if not question_ids:
        return [node for node in tree.descendants(page) if node.is_question_type]

    questions = []
    for question_id in question_ids:
        node = tree.find_by_id(question_id)
        if node is None:
            raise CourseDefinitionError(f"[{source}] unknown question id {question_id!r}")
        questions.append(node)
    return questions
