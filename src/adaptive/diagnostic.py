"""
Diagnostic Outcome Processor.

Runs when the diagnostic assessment completes:
1. Collect the blocks of the questions actually presented
2. Build the related-learning index and find masterable topics
3. Gate those topics (and persist the decision)
4. On a pass: hide the final assessment, submit the score
5. Notify listeners, then recalculate course completion
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from src.adaptive.correctness import BlockCorrectnessEvaluator
from src.adaptive.final_assessment import FinalAssessmentHider
from src.adaptive.models import SCORE_KEY, AdaptiveContentConfig
from src.adaptive.policies import GatingPolicyApplier
from src.adaptive.related_learning import build_related_learning_index, unique_parent_blocks
from src.assessment.state import AssessmentState
from src.core.events import DIAGNOSTIC_COMPLETE, EventBus
from src.course.completion import CompletionChecker
from src.course.models import CourseTree
from src.storage.base import OfflineStorage, StorageError


@dataclass
class DiagnosticOutcome:
    """What one diagnostic pass decided."""

    assessment_id: str
    is_pass: bool
    masterable_topics: list[str] = field(default_factory=list)
    gated_ids: list[str] = field(default_factory=list)
    final_assessment_hidden: bool = False
    score_submitted: bool = False


class DiagnosticOutcomeProcessor:
    """Turns a completed diagnostic into gating decisions."""

    def __init__(
        self,
        config: AdaptiveContentConfig,
        tree: CourseTree,
        storage: OfflineStorage,
        applier: GatingPolicyApplier,
        hider: FinalAssessmentHider,
        completion: CompletionChecker,
        bus: EventBus,
    ):
        self._config = config
        self._tree = tree
        self._storage = storage
        self._applier = applier
        self._hider = hider
        self._completion = completion
        self._bus = bus

    def on_assessment_complete(self, state: AssessmentState) -> DiagnosticOutcome | None:
        """
        Listener for ASSESSMENT_COMPLETE.

        Returns:
            The outcome, or None when the event is for another assessment
        """
        if state.id != self._config.diagnostic_assessment_id:
            return None

        logger.info(f"Diagnostic {state.id} complete (pass={state.is_pass})")
        outcome = DiagnosticOutcome(assessment_id=state.id, is_pass=state.is_pass)

        outcome.masterable_topics = self.check_questions(state)
        outcome.gated_ids = self._applier.apply(outcome.masterable_topics, persist=True)

        if not state.is_pass:
            self._bus.trigger(DIAGNOSTIC_COMPLETE, state)
            return outcome

        outcome.final_assessment_hidden = self._hider.hide(
            self._config.final_assessment_id, persist=True
        )
        outcome.score_submitted = self.submit_score(state)

        # Listeners (e.g. a results display) run to completion before the
        # completion status is recalculated.
        self._bus.trigger(DIAGNOSTIC_COMPLETE, state)
        self._completion.check_completion_status()
        return outcome

    def check_questions(self, state: AssessmentState) -> list[str]:
        """Topics that every presented evidence block answered perfectly."""
        blocks = unique_parent_blocks(state.question_models, self._tree)
        index = build_related_learning_index(blocks)
        evaluator = BlockCorrectnessEvaluator(self._tree)
        return evaluator.masterable_topics(index)

    def submit_score(self, state: AssessmentState) -> bool:
        """Record the diagnostic score when the course asks for it."""
        if not self._config.should_submit_score:
            return False

        if state.is_percentage_based:
            self._storage.set(SCORE_KEY, state.score_as_percent, 0, 100)
        else:
            self._storage.set(SCORE_KEY, state.score, 0, state.max_score)
        try:
            self._storage.save()
        except StorageError as e:
            logger.error(f"Could not submit diagnostic score for {state.id}: {e}")
            return False
        logger.info(f"Submitted diagnostic score for {state.id}")
        return True
