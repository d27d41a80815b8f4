"""Signals raised by states and the observer contract that consumes them."""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class EventType(str, Enum):
    """Outcome of one state execution."""

    FINISH = "finish"
    DOCKER_ERROR = "docker_error"
    UNKNOWN_ERROR = "unknown_error"
    UNRESOLVABLE_ERROR = "unresolvable_error"

    @property
    def is_error(self) -> bool:
        return self is not EventType.FINISH


class Observer(Protocol):
    """Receiver of a state's completion signal."""

    async def update(self, event: EventType) -> None:
        """Handle the event raised by the subscribed state."""
