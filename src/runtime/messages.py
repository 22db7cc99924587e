"""Status and break text builders for presenters."""

from __future__ import annotations

from breaks import BreakStats
from breaks.constants import (
    ACTION_CONFIRM_BREAK,
    ACTION_MANUAL_BREAK,
    ACTION_TOGGLE_PAUSE,
    KIND_MICRO,
    PHASE_AWAITING_CONFIRMATION,
    PHASE_IDLE_PAUSED,
    PHASE_INACTIVE,
    PHASE_PAUSED,
    REASON_AWAITING,
    REASON_NOT_ACTIVE,
    REASON_NOT_AWAITING,
    REASON_UNKNOWN_KIND,
)

ICON_MICRO = "👀"
ICON_LONG = "☕️"
ICON_PAUSED = "⏸️"
ICON_AWAITING = "✅"
ICON_IDLE = "😴"


def format_time_interval(seconds: float) -> str:
    """Format seconds as e.g. `1h 5m 10s`; seconds show when non-zero or alone."""
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def format_countdown(seconds: float) -> str:
    """Format a countdown as `M:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{remainder:02d}"


def break_label(kind: str) -> str:
    return "Micro break" if kind == KIND_MICRO else "Long break"


def status_title(stats: BreakStats) -> str:
    """Compact status-bar title for the current scheduler state."""
    if stats.phase == PHASE_AWAITING_CONFIRMATION:
        return ICON_AWAITING
    if stats.phase == PHASE_PAUSED:
        return ICON_PAUSED
    if stats.phase == PHASE_IDLE_PAUSED:
        return f"{ICON_IDLE} Idle"
    if stats.phase == PHASE_INACTIVE:
        return ICON_PAUSED

    kind, seconds = stats.next_break
    icon = ICON_MICRO if kind == KIND_MICRO else ICON_LONG
    return f"{icon} {format_countdown(seconds)}"


def break_message(kind: str, duration_seconds: float) -> str:
    if kind == KIND_MICRO:
        return (
            f"Time for a micro break. Look away from the screen for "
            f"{format_time_interval(duration_seconds)}."
        )
    return (
        f"Time for a long break. Stand up and step away for "
        f"{format_time_interval(duration_seconds)}."
    )


def cycle_message(stats: BreakStats) -> str:
    return (
        f"Micro breaks this cycle: {stats.micro_in_cycle}/"
        f"{stats.max_micro_per_long_cycle}"
    )


def rejection_text(action: str, reason: str) -> str:
    """Return presenter text explaining why a command was ignored."""
    if reason == REASON_NOT_AWAITING and action == ACTION_CONFIRM_BREAK:
        return "There is no break waiting for confirmation."
    if reason == REASON_AWAITING and action == ACTION_MANUAL_BREAK:
        return "Finish the current break before starting another one."
    if reason == REASON_NOT_ACTIVE and action == ACTION_MANUAL_BREAK:
        return "Breaks are paused. Resume them to start a break."
    if reason == REASON_NOT_ACTIVE and action == ACTION_TOGGLE_PAUSE:
        return "Breaks have not been started yet."
    if reason == REASON_UNKNOWN_KIND:
        return "Unknown break type."
    return "That action is not possible right now."
