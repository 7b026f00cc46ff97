"""
Course Model.

The content hierarchy (course -> pages -> blocks -> components) the gating
engine queries and mutates, plus completion-status recalculation.

The JSON loader lives in src.course.loader and is imported explicitly.
"""
from src.course.models import (
    BlockAdaptiveConfig,
    CompletionCriteria,
    ContentKind,
    ContentNode,
    CourseTree,
)
from src.course.completion import CompletionChecker

__all__ = [
    "BlockAdaptiveConfig",
    "CompletionChecker",
    "CompletionCriteria",
    "ContentKind",
    "ContentNode",
    "CourseTree",
]
