"""
Course completion status.

Content counts as complete when every available, non-optional page is
complete. A node is complete if it is flagged so, or if it has children and
every available, non-optional child is complete. When the criteria require
it, the tracked assessments must also have passed.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from src.assessment.state import AssessmentRegistry
from src.course.models import CompletionCriteria, ContentKind, ContentNode, CourseTree


class CompletionChecker:
    """Recalculate and record whether the course is complete."""

    def __init__(
        self,
        tree: CourseTree,
        criteria: CompletionCriteria,
        assessments: AssessmentRegistry,
        assessment_ids: Sequence[str] | None = None,
    ):
        self._tree = tree
        self.criteria = criteria
        self._assessments = assessments
        self._assessment_ids = list(assessment_ids) if assessment_ids else None

    def is_node_complete(self, node: ContentNode) -> bool:
        if node.is_complete:
            return True
        required = [
            child
            for child in self._tree.children(node)
            if child.is_available and not child.is_optional
        ]
        if not required:
            return False
        return all(self.is_node_complete(child) for child in required)

    def is_content_complete(self) -> bool:
        pages = [
            page
            for page in self._tree.of_kind(ContentKind.PAGE)
            if page.is_available and not page.is_optional
        ]
        return all(self.is_node_complete(page) for page in pages)

    def is_assessment_complete(self) -> bool:
        if self._assessment_ids is None:
            states = list(self._assessments)
        else:
            states = [self._assessments.get(a_id) for a_id in self._assessment_ids]
        return all(state is not None and state.is_pass for state in states)

    def check_completion_status(self) -> bool:
        """Evaluate the criteria and write the result onto the course node."""
        course = self._tree.course
        if course is None:
            return False

        complete = True
        if self.criteria.require_content_completed and not self.is_content_complete():
            complete = False
        if self.criteria.require_assessment_completed and not self.is_assessment_complete():
            complete = False

        if complete and not course.is_complete:
            logger.info(f"Course {course.id} is now complete")
        self._tree.set(course, is_complete=complete)
        return complete
