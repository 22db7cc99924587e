"""Break kind, phase, action, and reason constants used by the scheduler."""

from __future__ import annotations

KIND_MICRO = "micro"
KIND_LONG = "long"

BREAK_KINDS: tuple[str, ...] = (KIND_MICRO, KIND_LONG)

DEFAULT_MICRO_INTERVAL_SECONDS = 20 * 60
DEFAULT_MICRO_DURATION_SECONDS = 20
DEFAULT_LONG_INTERVAL_SECONDS = 60 * 60
DEFAULT_LONG_DURATION_SECONDS = 10 * 60
DEFAULT_IDLE_THRESHOLD_SECONDS = 60.0

PHASE_INACTIVE = "inactive"
PHASE_RUNNING = "running"
PHASE_PAUSED = "paused"
PHASE_IDLE_PAUSED = "idle_paused"
PHASE_AWAITING_CONFIRMATION = "awaiting_confirmation"

ACTIVE_PHASES: frozenset[str] = frozenset({PHASE_RUNNING, PHASE_IDLE_PAUSED})

ACTION_ACTIVATE = "activate"
ACTION_TOGGLE_PAUSE = "toggle_pause"
ACTION_MANUAL_BREAK = "manual_break"
ACTION_CONFIRM_BREAK = "confirm_break"
ACTION_RESET = "reset"
ACTION_RECONFIGURE = "reconfigure"

REASON_ACTIVATED = "activated"
REASON_PAUSED = "paused"
REASON_RESUMED = "resumed"
REASON_BREAK_STARTED = "break_started"
REASON_CONFIRMED = "confirmed"
REASON_RESET = "reset"
REASON_RECONFIGURED = "reconfigured"
REASON_ALREADY_ACTIVE = "already_active"
REASON_NOT_ACTIVE = "not_active"
REASON_NOT_AWAITING = "not_awaiting_confirmation"
REASON_AWAITING = "awaiting_confirmation"
REASON_UNKNOWN_KIND = "unknown_break_kind"
