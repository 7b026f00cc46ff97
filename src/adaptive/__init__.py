"""
Adaptive Content Gating.

Lets a learner skip 'related learning' they have already mastered, as shown
by a diagnostic assessment.

Components:
- build_related_learning_index: Inverts block -> topics into topic -> blocks
- BlockCorrectnessEvaluator: Per-pass "every question correct?" check
- GatingPolicyApplier: Hides, makes optional or completes content
- FinalAssessmentHider: Drops the final assessment after a passed diagnostic
- DiagnosticOutcomeProcessor: Runs the above when the diagnostic completes
- SessionRestoreHandler: Replays persisted decisions on course start
- DiagnosticChoice: Learner's opt-in / opt-out of the diagnostic
- AdaptiveContentEngine: Main orchestration layer
"""
from src.adaptive.models import (
    DIAGNOSTIC_OPT_OUT_KEY,
    GATING_STATE_KEY,
    SCORE_KEY,
    AdaptiveContentConfig,
    PageStatus,
)
from src.adaptive.related_learning import (
    RelatedLearningIndex,
    build_related_learning_index,
    unique_parent_blocks,
)
from src.adaptive.correctness import BlockCorrectnessEvaluator
from src.adaptive.gating_state import PersistedGatingState
from src.adaptive.policies import POLICIES, GatingPolicy, GatingPolicyApplier, policy_for
from src.adaptive.final_assessment import FinalAssessmentHider
from src.adaptive.diagnostic import DiagnosticOutcome, DiagnosticOutcomeProcessor
from src.adaptive.restore import SessionRestoreHandler
from src.adaptive.choice import DiagnosticChoice
from src.adaptive.engine import AdaptiveContentEngine

__all__ = [
    # Main engine
    "AdaptiveContentEngine",
    # Component classes
    "BlockCorrectnessEvaluator",
    "DiagnosticChoice",
    "DiagnosticOutcomeProcessor",
    "FinalAssessmentHider",
    "GatingPolicy",
    "GatingPolicyApplier",
    "PersistedGatingState",
    "SessionRestoreHandler",
    # Functions
    "build_related_learning_index",
    "policy_for",
    "unique_parent_blocks",
    # Data models
    "AdaptiveContentConfig",
    "DiagnosticOutcome",
    "RelatedLearningIndex",
    "POLICIES",
    # Enums
    "PageStatus",
    # Storage keys
    "DIAGNOSTIC_OPT_OUT_KEY",
    "GATING_STATE_KEY",
    "SCORE_KEY",
]
