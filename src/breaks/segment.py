"""Countdown progress for a single break kind."""

from __future__ import annotations

import math
from typing import Optional


class TimerSegment:
    """Work time credited toward one break interval.

    Progress is split into ``accumulated`` seconds from closed segments and an
    optional open segment starting at ``running_since`` (monotonic seconds).
    """

    def __init__(self, interval: float):
        if not math.isfinite(interval) or interval <= 0:
            raise ValueError("interval must be a finite number greater than zero")
        self.interval = float(interval)
        self.accumulated = 0.0
        self.running_since: Optional[float] = None

    def __repr__(self) -> str:
        return (
            f"TimerSegment(interval={self.interval!r}, "
            f"accumulated={self.accumulated!r}, "
            f"running_since={self.running_since!r})"
        )

    @property
    def is_running(self) -> bool:
        return self.running_since is not None

    def remaining(self, now: float) -> float:
        consumed = self.accumulated
        if self.running_since is not None:
            consumed += max(0.0, now - self.running_since)
        return max(0.0, self.interval - consumed)

    def start(self, now: float) -> None:
        if self.running_since is not None:
            raise RuntimeError("segment is already running")
        self.running_since = now

    def pause(self, now: float) -> float:
        """Close the running segment and credit its full elapsed time."""
        if self.running_since is None:
            raise RuntimeError("segment is not running")
        elapsed = max(0.0, now - self.running_since)
        self.accumulated += elapsed
        self.running_since = None
        return elapsed

    def pause_crediting_active_time(self, now: float, idle_seconds: float) -> float:
        """Close the running segment, crediting only time the user was active."""
        if self.running_since is None:
            raise RuntimeError("segment is not running")
        elapsed = max(0.0, now - self.running_since)
        credited = max(0.0, elapsed - max(0.0, idle_seconds))
        self.accumulated += credited
        self.running_since = None
        return credited

    def reset(self) -> None:
        self.accumulated = 0.0
        self.running_since = None

    def fire_and_consume(self) -> None:
        # Work that led to a break is spent, never carried into the next interval.
        self.accumulated = 0.0
        self.running_since = None
