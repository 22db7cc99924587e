"""Event dataclasses and publisher contracts emitted by the break scheduler."""

from __future__ import annotations

from dataclasses import dataclass
from queue import Queue
from typing import Protocol

from .stats import BreakStats


@dataclass(frozen=True)
class BreakStartedEvent:
    """Event emitted when a micro or long break begins."""
    kind: str
    duration_seconds: float
    stats: BreakStats


@dataclass(frozen=True)
class MenuRefreshEvent:
    """Event emitted when presenters should re-render scheduler state."""
    stats: BreakStats


SchedulerEvent = BreakStartedEvent | MenuRefreshEvent


class EventPublisher(Protocol):
    """Protocol for publishing scheduler events."""

    def publish(self, event: SchedulerEvent) -> None: ...


class QueueEventPublisher:
    """Event publisher that pushes events to a queue."""

    def __init__(self, queue: Queue):
        self._queue = queue

    def publish(self, event: SchedulerEvent) -> None:
        self._queue.put(event)
