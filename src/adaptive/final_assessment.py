"""
Final-assessment hiding after a passed diagnostic.
"""

from __future__ import annotations

from loguru import logger

from src.adaptive.models import PageStatus
from src.adaptive.policies import GatingPolicyApplier
from src.assessment.state import AssessmentRegistry
from src.course.models import CompletionCriteria


class FinalAssessmentHider:
    """
    Suppress the final assessment once the diagnostic proves it unnecessary.

    The page is only hidden under the `unavailable` policy; the other policies
    gate the content leading up to the assessment, not the assessment itself.
    In every case the course stops requiring an assessment for completion.
    """

    def __init__(
        self,
        assessments: AssessmentRegistry,
        applier: GatingPolicyApplier,
        criteria: CompletionCriteria,
    ):
        self._assessments = assessments
        self._applier = applier
        self._criteria = criteria

    def hide(self, final_assessment_id: str | None, persist: bool) -> bool:
        """
        Returns:
            True if the assessment was found and handled
        """
        if not final_assessment_id:
            return False

        logger.debug(f"hideFinalAssessment {final_assessment_id} persist={persist}")
        final_assessment = self._assessments.get(final_assessment_id)
        if final_assessment is None:
            logger.warning(
                f"adaptiveContent: unable to find a final assessment with id {final_assessment_id!r}"
            )
            return False

        if self._applier.status is PageStatus.UNAVAILABLE:
            self._applier.apply([final_assessment.page_id], persist)

        self._criteria.require_assessment_completed = False
        return True
