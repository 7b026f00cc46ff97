"""
Assessment state as consumed by the gating engine.

The scoring algorithm is owned by the assessment subsystem; this module only
carries its outputs (pass/fail, score fields and the questions actually shown).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.course.models import ContentNode


@dataclass
class AssessmentState:
    """Outcome of one assessment attempt."""

    id: str
    page_id: str
    is_pass: bool = False
    score: float = 0.0
    max_score: float = 0.0
    is_percentage_based: bool = True
    score_as_percent: float = 0.0
    is_complete: bool = False

    # Question components presented in this attempt (banking/randomisation aware)
    question_models: list[ContentNode] = field(default_factory=list)


class AssessmentRegistry:
    """Assessment states keyed by assessment id."""

    def __init__(self) -> None:
        self._by_assessment_id: dict[str, AssessmentState] = {}

    def register(self, state: AssessmentState) -> AssessmentState:
        if state.id in self._by_assessment_id:
            raise ValueError(f"Duplicate assessment id: {state.id}")
        self._by_assessment_id[state.id] = state
        return state

    def get(self, assessment_id: str) -> AssessmentState | None:
        return self._by_assessment_id.get(assessment_id)

    def __contains__(self, assessment_id: object) -> bool:
        return assessment_id in self._by_assessment_id

    def __iter__(self):
        return iter(self._by_assessment_id.values())

    def __len__(self) -> int:
        return len(self._by_assessment_id)
