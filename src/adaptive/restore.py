"""
Session restore on course start.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from src.adaptive.final_assessment import FinalAssessmentHider
from src.adaptive.gating_state import PersistedGatingState
from src.adaptive.models import AdaptiveContentConfig
from src.adaptive.policies import GatingPolicyApplier
from src.assessment.state import AssessmentRegistry, AssessmentState
from src.core.events import ASSESSMENT_COMPLETE, EventBus
from src.course.models import CourseTree


class SessionRestoreHandler:
    """
    Decide, at course start, between waiting for a diagnostic and replaying
    decisions recorded in an earlier session.
    """

    def __init__(
        self,
        config: AdaptiveContentConfig | None,
        tree: CourseTree,
        assessments: AssessmentRegistry,
        gating_state: PersistedGatingState,
        applier: GatingPolicyApplier,
        hider: FinalAssessmentHider,
        bus: EventBus,
        on_diagnostic_complete: Callable[[AssessmentState], object],
    ):
        self._config = config
        self._tree = tree
        self._assessments = assessments
        self._gating_state = gating_state
        self._applier = applier
        self._hider = hider
        self._bus = bus
        self._on_diagnostic_complete = on_diagnostic_complete

    def on_course_start(self) -> bool:
        """
        Listener for COURSE_START.

        Returns:
            True if earlier decisions were restored, False otherwise
        """
        if self._config is None or not self._config.is_enabled:
            return False

        persisted = self._gating_state.load()
        if not persisted:
            # No previous attempt: wait for the learner to finish the diagnostic
            self._bus.on(ASSESSMENT_COMPLETE, self._on_diagnostic_complete)
            return False

        logger.info(f"Restoring gating decisions for {persisted}")
        self._applier.apply(persisted, persist=False)

        final_assessment_id = self._config.final_assessment_id
        if not final_assessment_id:
            return True

        final_assessment = self._assessments.get(final_assessment_id)
        if final_assessment is not None:
            page = self._tree.find_by_id(final_assessment.page_id)
            if page is not None and page.is_available:
                return True

        self._hider.hide(final_assessment_id, persist=False)
        return True
