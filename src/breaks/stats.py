"""Display-ready statistics derived from scheduler state."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .constants import KIND_LONG, KIND_MICRO, PHASE_AWAITING_CONFIRMATION
from .segment import TimerSegment


@dataclass(frozen=True)
class BreakStats:
    """Immutable snapshot of break progress exposed to presenters."""
    phase: str
    micro_taken: int
    long_taken: int
    time_until_micro: float
    time_until_long: float
    current_break_kind: Optional[str]
    micro_in_cycle: int
    max_micro_per_long_cycle: int

    @property
    def is_awaiting_confirmation(self) -> bool:
        return self.phase == PHASE_AWAITING_CONFIRMATION

    @property
    def next_break(self) -> tuple[str, float]:
        """Return the kind and seconds of the nearer break; micro wins ties."""
        if self.time_until_micro <= self.time_until_long:
            return KIND_MICRO, self.time_until_micro
        return KIND_LONG, self.time_until_long


def max_micro_per_long_cycle(micro_interval: float, long_interval: float) -> int:
    if micro_interval <= 0:
        return 0
    # Half-up rounding so a 2.5 ratio reports three micro breaks per cycle.
    return int(math.floor(long_interval / micro_interval + 0.5))


def compute_stats(
    *,
    micro: TimerSegment,
    long: TimerSegment,
    phase: str,
    last_break_kind: Optional[str],
    micro_taken: int,
    long_taken: int,
    micro_in_cycle: int,
    now: float,
) -> BreakStats:
    """Build a ``BreakStats`` snapshot without touching scheduler state.

    While a break of some kind is waiting for confirmation, that kind reports
    its full interval since it restarts fresh once confirmed. Every other
    segment reports ``remaining(now)``, which falls back to the accumulated
    progress when the segment is parked.
    """
    if last_break_kind == KIND_MICRO:
        time_until_micro = micro.interval
    else:
        time_until_micro = micro.remaining(now)

    if last_break_kind == KIND_LONG:
        time_until_long = long.interval
    else:
        time_until_long = long.remaining(now)

    return BreakStats(
        phase=phase,
        micro_taken=micro_taken,
        long_taken=long_taken,
        time_until_micro=time_until_micro,
        time_until_long=time_until_long,
        current_break_kind=last_break_kind,
        micro_in_cycle=micro_in_cycle,
        max_micro_per_long_cycle=max_micro_per_long_cycle(
            micro.interval,
            long.interval,
        ),
    )
