"""
Core Module - Shared infrastructure.

Components:
- events: Synchronous event bus and the event names the engine uses
"""

from src.core.events import (
    ASSESSMENT_COMPLETE,
    COURSE_START,
    DIAGNOSTIC_COMPLETE,
    EventBus,
)

__all__ = [
    "ASSESSMENT_COMPLETE",
    "COURSE_START",
    "DIAGNOSTIC_COMPLETE",
    "EventBus",
]
