"""In-process bus carrying host activity events to the tracker."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from enum import Enum
from typing import Any

logger = logging.getLogger("activity.events")

ActivityHandler = Callable[[dict[str, Any]], None]


class ActivityEvent(str, Enum):
    """Events a host reports about its projects and files.

    Payloads are dicts with ``project``, an optional ``file`` and an
    optional ``at`` timestamp.
    """

    PROJECT_OPENED = "project.opened"
    PROJECT_CLOSED = "project.closed"
    FILE_OPENED = "file.opened"
    FILE_ACCESSED = "file.accessed"
    FILE_CLOSED = "file.closed"

    @classmethod
    def parse(cls, name: str) -> ActivityEvent:
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"unknown event '{name}'") from None


class EventBus:
    """Routes activity events to their handlers in subscription order."""

    def __init__(self) -> None:
        self._handlers: dict[ActivityEvent, list[ActivityHandler]] = defaultdict(list)

    def subscribe(self, event: ActivityEvent, handler: ActivityHandler) -> None:
        self._handlers[ActivityEvent(event)].append(handler)

    def emit(self, event: ActivityEvent, payload: dict[str, Any]) -> int:
        """Deliver ``payload`` to every handler of ``event``; returns how many ran."""
        handlers = list(self._handlers.get(ActivityEvent(event), ()))
        if not handlers:
            logger.debug("No handler for %s", event.value if isinstance(event, ActivityEvent) else event)
        for handler in handlers:
            handler(payload)
        return len(handlers)
