"""
Assessment subsystem interface.

Only the outputs the gating engine consumes: pass/fail, score fields,
the owning page and the questions presented in the attempt.
"""
from src.assessment.state import AssessmentRegistry, AssessmentState

__all__ = [
    "AssessmentRegistry",
    "AssessmentState",
]
