from __future__ import annotations

import math
from dataclasses import dataclass

from .constants import (
    DEFAULT_IDLE_THRESHOLD_SECONDS,
    DEFAULT_LONG_DURATION_SECONDS,
    DEFAULT_LONG_INTERVAL_SECONDS,
    DEFAULT_MICRO_DURATION_SECONDS,
    DEFAULT_MICRO_INTERVAL_SECONDS,
    KIND_MICRO,
)


@dataclass(frozen=True)
class BreakConfig:
    """Validated break intervals, break lengths, and idle threshold in seconds."""
    micro_interval_seconds: float = DEFAULT_MICRO_INTERVAL_SECONDS
    micro_duration_seconds: float = DEFAULT_MICRO_DURATION_SECONDS
    long_interval_seconds: float = DEFAULT_LONG_INTERVAL_SECONDS
    long_duration_seconds: float = DEFAULT_LONG_DURATION_SECONDS
    idle_threshold_seconds: float = DEFAULT_IDLE_THRESHOLD_SECONDS

    def __post_init__(self) -> None:
        for field in (
            "micro_interval_seconds",
            "micro_duration_seconds",
            "long_interval_seconds",
            "long_duration_seconds",
            "idle_threshold_seconds",
        ):
            value = getattr(self, field)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{field} must be a finite number greater than zero")

    def interval_for(self, kind: str) -> float:
        if kind == KIND_MICRO:
            return float(self.micro_interval_seconds)
        return float(self.long_interval_seconds)

    def duration_for(self, kind: str) -> float:
        if kind == KIND_MICRO:
            return float(self.micro_duration_seconds)
        return float(self.long_duration_seconds)

    @classmethod
    def from_settings(cls, breaks, idle=None) -> "BreakConfig":
        threshold = (
            float(idle.threshold_seconds)
            if idle is not None
            else DEFAULT_IDLE_THRESHOLD_SECONDS
        )
        return cls(
            micro_interval_seconds=float(breaks.micro_interval_seconds),
            micro_duration_seconds=float(breaks.micro_duration_seconds),
            long_interval_seconds=float(breaks.long_interval_seconds),
            long_duration_seconds=float(breaks.long_duration_seconds),
            idle_threshold_seconds=threshold,
        )
