"""
Adaptive Content Engine.

Wires the gating components to a course, its assessments, offline storage and
an event bus. Nothing here reaches for globals: every collaborator is passed
in, so a test can build an engine around a hand-made tree.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from src.adaptive.choice import DiagnosticChoice
from src.adaptive.diagnostic import DiagnosticOutcome, DiagnosticOutcomeProcessor
from src.adaptive.final_assessment import FinalAssessmentHider
from src.adaptive.gating_state import PersistedGatingState
from src.adaptive.models import AdaptiveContentConfig, PageStatus
from src.adaptive.policies import GatingPolicyApplier
from src.adaptive.restore import SessionRestoreHandler
from src.assessment.state import AssessmentRegistry, AssessmentState
from src.core.events import COURSE_START, EventBus
from src.course.completion import CompletionChecker
from src.course.models import CompletionCriteria, CourseTree
from src.storage.base import OfflineStorage

if TYPE_CHECKING:
    from src.course.loader import LoadedCourse


class AdaptiveContentEngine:
    """Main orchestration layer for diagnostic-driven content gating."""

    def __init__(
        self,
        config: AdaptiveContentConfig | None,
        tree: CourseTree,
        assessments: AssessmentRegistry,
        storage: OfflineStorage,
        bus: EventBus | None = None,
        criteria: CompletionCriteria | None = None,
    ):
        self.config = config
        self.tree = tree
        self.assessments = assessments
        self.storage = storage
        self.bus = bus or EventBus()
        self.criteria = criteria or CompletionCriteria()

        status = config.set_page_status_as if config else PageStatus.UNAVAILABLE
        self.gating_state = PersistedGatingState(storage)
        self.applier = GatingPolicyApplier(tree, self.gating_state, status)
        self.hider = FinalAssessmentHider(assessments, self.applier, self.criteria)

        final_id = config.final_assessment_id if config else None
        self.completion = CompletionChecker(
            tree,
            self.criteria,
            assessments,
            assessment_ids=[final_id] if final_id else None,
        )
        self.processor = (
            DiagnosticOutcomeProcessor(
                config, tree, storage, self.applier, self.hider, self.completion, self.bus
            )
            if config
            else None
        )
        self.restore_handler = SessionRestoreHandler(
            config,
            tree,
            assessments,
            self.gating_state,
            self.applier,
            self.hider,
            self.bus,
            on_diagnostic_complete=self._on_assessment_complete,
        )
        self.choice = DiagnosticChoice(config, storage) if config else None
        self.last_outcome: DiagnosticOutcome | None = None

    @classmethod
    def for_course(
        cls,
        course: LoadedCourse,
        storage: OfflineStorage,
        bus: EventBus | None = None,
    ) -> AdaptiveContentEngine:
        return cls(
            course.config,
            course.tree,
            course.assessments,
            storage,
            bus=bus,
            criteria=course.criteria,
        )

    @property
    def is_enabled(self) -> bool:
        return self.config is not None and self.config.is_enabled

    def attach(self) -> None:
        """Listen for course start on the bus."""
        self.bus.on(COURSE_START, self.restore_handler.on_course_start)
        logger.debug("Adaptive content engine attached")

    def _on_assessment_complete(self, state: AssessmentState) -> DiagnosticOutcome | None:
        if self.processor is None:
            return None
        outcome = self.processor.on_assessment_complete(state)
        if outcome is not None:
            self.last_outcome = outcome
        return outcome
