from .config import BreakConfig
from .events import (
    BreakStartedEvent,
    EventPublisher,
    MenuRefreshEvent,
    QueueEventPublisher,
    SchedulerEvent,
)
from .scheduler import (
    BreakScheduler,
    Clock,
    IdleSourceLike,
    SchedulerAction,
    SchedulerActionResult,
    SchedulerPhase,
    SegmentSnapshot,
)
from .segment import TimerSegment
from .stats import BreakStats, compute_stats

__all__ = [
    "BreakConfig",
    "BreakScheduler",
    "BreakStartedEvent",
    "BreakStats",
    "Clock",
    "EventPublisher",
    "IdleSourceLike",
    "MenuRefreshEvent",
    "QueueEventPublisher",
    "SchedulerAction",
    "SchedulerActionResult",
    "SchedulerEvent",
    "SchedulerPhase",
    "SegmentSnapshot",
    "TimerSegment",
    "compute_stats",
]
