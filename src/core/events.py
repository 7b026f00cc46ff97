"""
Event Bus.

Synchronous publish/subscribe used to wire the gating engine to its host:
- the host triggers COURSE_START once per session
- the assessment subsystem triggers ASSESSMENT_COMPLETE once per attempt
- the engine triggers DIAGNOSTIC_COMPLETE for results displays

Listeners run in registration order on the caller's stack. `trigger` returns
only after every listener has finished, so a caller can safely act on state the
listeners have settled.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

from loguru import logger

COURSE_START = "adapt:start"
ASSESSMENT_COMPLETE = "assessments:complete"
DIAGNOSTIC_COMPLETE = "diagnostic:complete"

Listener = Callable[..., Any]


class EventBus:
    """Named-event dispatcher with ordered, synchronous delivery."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> None:
        """Register a listener. Registering the same callable twice is a no-op."""
        if listener in self._listeners[event]:
            return
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener | None = None) -> None:
        """Remove one listener, or all listeners for the event when none is given."""
        if listener is None:
            self._listeners.pop(event, None)
            return
        if listener in self._listeners.get(event, []):
            self._listeners[event].remove(listener)

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, []))

    def trigger(self, event: str, *args: Any, **kwargs: Any) -> int:
        """
        Deliver an event to every registered listener.

        Returns:
            Number of listeners notified
        """
        listeners = self.listeners(event)
        logger.debug(f"trigger {event} -> {len(listeners)} listener(s)")
        for listener in listeners:
            listener(*args, **kwargs)
        return len(listeners)
