"""Thread-safe micro/long break state machine with idle correction."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Protocol

from .config import BreakConfig
from .constants import (
    ACTION_ACTIVATE,
    ACTION_CONFIRM_BREAK,
    ACTION_MANUAL_BREAK,
    ACTION_RECONFIGURE,
    ACTION_RESET,
    ACTION_TOGGLE_PAUSE,
    ACTIVE_PHASES,
    BREAK_KINDS,
    KIND_LONG,
    KIND_MICRO,
    PHASE_AWAITING_CONFIRMATION,
    PHASE_IDLE_PAUSED,
    PHASE_INACTIVE,
    PHASE_PAUSED,
    PHASE_RUNNING,
    REASON_ACTIVATED,
    REASON_ALREADY_ACTIVE,
    REASON_AWAITING,
    REASON_BREAK_STARTED,
    REASON_CONFIRMED,
    REASON_NOT_ACTIVE,
    REASON_NOT_AWAITING,
    REASON_PAUSED,
    REASON_RECONFIGURED,
    REASON_RESET,
    REASON_RESUMED,
    REASON_UNKNOWN_KIND,
)
from .events import BreakStartedEvent, EventPublisher, MenuRefreshEvent, SchedulerEvent
from .segment import TimerSegment
from .stats import BreakStats, compute_stats

Clock = Callable[[], float]

SchedulerPhase = Literal[
    "inactive",
    "running",
    "paused",
    "idle_paused",
    "awaiting_confirmation",
]
SchedulerAction = Literal[
    "activate",
    "toggle_pause",
    "manual_break",
    "confirm_break",
    "reset",
    "reconfigure",
]


class IdleSourceLike(Protocol):
    def current_idle_seconds(self) -> Optional[float]:
        ...


@dataclass(frozen=True)
class SegmentSnapshot:
    """Read-only copy of one segment's accounting."""
    interval: float
    accumulated: float
    running_since: Optional[float]

    @property
    def is_running(self) -> bool:
        return self.running_since is not None


@dataclass(frozen=True)
class SchedulerActionResult:
    """Result envelope returned after applying a scheduler operation."""
    action: SchedulerAction
    accepted: bool
    reason: str
    stats: BreakStats


class BreakScheduler:
    """Two coupled break countdowns driven by ticks and user events.

    The micro segment fires every ``micro_interval_seconds`` of active work and
    the long segment every ``long_interval_seconds``. A micro break parks the
    long countdown with its progress credited; a long break discards the micro
    progress entirely. Neither countdown re-arms until the break is confirmed.

    All state is guarded by one lock. Events produced while handling an
    operation are published after the lock is released.
    """

    def __init__(
        self,
        config: Optional[BreakConfig] = None,
        *,
        clock: Optional[Clock] = None,
        idle_source: Optional[IdleSourceLike] = None,
        publisher: Optional[EventPublisher] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config or BreakConfig()
        self._pending_config: Optional[BreakConfig] = None
        self._clock: Clock = clock or time.monotonic
        self._idle_source = idle_source
        self._publisher = publisher
        self._logger = logger or logging.getLogger("breaks")
        self._lock = threading.Lock()

        self._micro = TimerSegment(self._config.micro_interval_seconds)
        self._long = TimerSegment(self._config.long_interval_seconds)
        self._phase: SchedulerPhase = PHASE_INACTIVE
        self._last_break_kind: Optional[str] = None
        self._micro_taken = 0
        self._long_taken = 0
        self._micro_in_cycle = 0

    # --- Read access ----------------------------------------------------
    @property
    def phase(self) -> SchedulerPhase:
        with self._lock:
            return self._phase

    @property
    def config(self) -> BreakConfig:
        with self._lock:
            return self._config

    @property
    def last_break_kind(self) -> Optional[str]:
        with self._lock:
            return self._last_break_kind

    def segment(self, kind: str) -> SegmentSnapshot:
        with self._lock:
            segment = self._segment_locked(kind)
            return SegmentSnapshot(
                interval=segment.interval,
                accumulated=segment.accumulated,
                running_since=segment.running_since,
            )

    def stats(self, now: Optional[float] = None) -> BreakStats:
        with self._lock:
            return self._stats_locked(self._clock() if now is None else now)

    # --- Operations -----------------------------------------------------
    def activate(self) -> SchedulerActionResult:
        return self._apply(ACTION_ACTIVATE, self._activate_action_locked)

    def toggle_pause(self) -> SchedulerActionResult:
        return self._apply(ACTION_TOGGLE_PAUSE, self._toggle_pause_locked)

    def manual_break(self, kind: str) -> SchedulerActionResult:
        return self._apply(ACTION_MANUAL_BREAK, self._manual_break_locked, kind)

    def confirm_break(self) -> SchedulerActionResult:
        return self._apply(ACTION_CONFIRM_BREAK, self._confirm_break_locked)

    def reset_all(self) -> SchedulerActionResult:
        return self._apply(ACTION_RESET, self._reset_locked)

    def reconfigure(self, config: BreakConfig) -> SchedulerActionResult:
        """Store new settings; they take effect on the next activation."""
        return self._apply(ACTION_RECONFIGURE, self._reconfigure_locked, config)

    def tick(self, now: Optional[float] = None) -> BreakStats:
        """Sample idle state, advance segments, and fire due breaks."""
        events: list[SchedulerEvent] = []
        with self._lock:
            current = self._clock() if now is None else now
            if self._tick_locked(current, events):
                events.append(MenuRefreshEvent(stats=self._stats_locked(current)))
            stats = self._stats_locked(current)
        self._publish(events)
        return stats

    # --- Internal -------------------------------------------------------
    def _apply(self, action: SchedulerAction, handler, *args) -> SchedulerActionResult:
        events: list[SchedulerEvent] = []
        with self._lock:
            now = self._clock()
            accepted, reason = handler(now, events, *args)
            stats = self._stats_locked(now)
            if accepted:
                events.append(MenuRefreshEvent(stats=stats))
            result = SchedulerActionResult(
                action=action,
                accepted=accepted,
                reason=reason,
                stats=stats,
            )
        if not result.accepted:
            self._logger.debug("Ignoring %s: %s", action, reason)
        self._publish(events)
        return result

    def _publish(self, events: list[SchedulerEvent]) -> None:
        if self._publisher is None:
            return
        for event in events:
            self._publisher.publish(event)

    def _segment_locked(self, kind: str) -> TimerSegment:
        if kind == KIND_MICRO:
            return self._micro
        if kind == KIND_LONG:
            return self._long
        raise ValueError(f"Unknown break kind: {kind}")

    def _stats_locked(self, now: float) -> BreakStats:
        return compute_stats(
            micro=self._micro,
            long=self._long,
            phase=self._phase,
            last_break_kind=self._last_break_kind,
            micro_taken=self._micro_taken,
            long_taken=self._long_taken,
            micro_in_cycle=self._micro_in_cycle,
            now=now,
        )

    def _activate_action_locked(
        self,
        now: float,
        events: list[SchedulerEvent],
    ) -> tuple[bool, str]:
        if self._phase == PHASE_RUNNING:
            return False, REASON_ALREADY_ACTIVE
        if self._phase == PHASE_AWAITING_CONFIRMATION:
            return False, REASON_AWAITING
        if self._phase == PHASE_PAUSED and self._last_break_kind is not None:
            self._phase = PHASE_AWAITING_CONFIRMATION
            return True, REASON_RESUMED
        self._activate_locked(now, events)
        return True, REASON_ACTIVATED

    def _activate_locked(self, now: float, events: list[SchedulerEvent]) -> None:
        if self._pending_config is not None:
            self._config = self._pending_config
            self._pending_config = None
            self._micro.interval = float(self._config.micro_interval_seconds)
            self._long.interval = float(self._config.long_interval_seconds)
            self._logger.info(
                "Applied break settings: micro=%ss long=%ss idle_threshold=%ss",
                self._config.micro_interval_seconds,
                self._config.long_interval_seconds,
                self._config.idle_threshold_seconds,
            )

        self._phase = PHASE_RUNNING
        for kind in BREAK_KINDS:
            segment = self._segment_locked(kind)
            if self._phase == PHASE_AWAITING_CONFIRMATION:
                # A break fired earlier in this activation; keep this one parked.
                self._logger.debug(
                    "Keeping %s parked with %.1fs accumulated",
                    kind,
                    segment.accumulated,
                )
                continue

            effective = segment.interval - segment.accumulated
            if effective > 0:
                if not segment.is_running:
                    segment.start(now)
                self._logger.debug("Armed %s break: %.1fs remaining", kind, effective)
            else:
                self._logger.info("%s break is overdue; starting it now", kind.capitalize())
                self._fire_locked(kind, now, events)

    def _fire_locked(self, kind: str, now: float, events: list[SchedulerEvent]) -> None:
        if kind == KIND_MICRO:
            if self._long.is_running:
                self._long.pause(now)
            self._micro.fire_and_consume()
        else:
            self._micro.reset()
            self._long.fire_and_consume()

        self._last_break_kind = kind
        self._phase = PHASE_AWAITING_CONFIRMATION
        self._logger.info(
            "%s break started: duration=%ss micro_accumulated=%.1fs long_accumulated=%.1fs",
            kind.capitalize(),
            self._config.duration_for(kind),
            self._micro.accumulated,
            self._long.accumulated,
        )
        events.append(
            BreakStartedEvent(
                kind=kind,
                duration_seconds=self._config.duration_for(kind),
                stats=self._stats_locked(now),
            )
        )

    def _tick_locked(self, now: float, events: list[SchedulerEvent]) -> bool:
        if self._phase not in ACTIVE_PHASES:
            return False

        changed = False
        idle_seconds = self._read_idle_seconds()
        is_idle = (
            idle_seconds is not None
            and idle_seconds > self._config.idle_threshold_seconds
        )

        if self._phase == PHASE_RUNNING and is_idle:
            for segment in (self._micro, self._long):
                if segment.is_running:
                    segment.pause_crediting_active_time(now, idle_seconds)
            self._phase = PHASE_IDLE_PAUSED
            self._logger.info(
                "Idle for %.0fs; pausing breaks (micro_accumulated=%.1fs long_accumulated=%.1fs)",
                idle_seconds,
                self._micro.accumulated,
                self._long.accumulated,
            )
            return True

        if self._phase == PHASE_IDLE_PAUSED:
            if is_idle:
                return False
            for segment in (self._micro, self._long):
                if not segment.is_running:
                    segment.start(now)
            self._phase = PHASE_RUNNING
            self._logger.info("User active again; resuming breaks")
            changed = True

        if self._micro.remaining(now) <= 0:
            self._fire_locked(KIND_MICRO, now, events)
            return True
        if self._long.remaining(now) <= 0:
            self._fire_locked(KIND_LONG, now, events)
            return True
        return changed

    def _read_idle_seconds(self) -> Optional[float]:
        if self._idle_source is None:
            return None
        try:
            return self._idle_source.current_idle_seconds()
        except Exception as error:
            self._logger.debug("Idle source failed, assuming active: %s", error)
            return None

    def _toggle_pause_locked(
        self,
        now: float,
        events: list[SchedulerEvent],
    ) -> tuple[bool, str]:
        if self._phase == PHASE_INACTIVE:
            return False, REASON_NOT_ACTIVE

        if self._phase == PHASE_PAUSED:
            if self._last_break_kind is not None:
                self._phase = PHASE_AWAITING_CONFIRMATION
                self._logger.info(
                    "Breaks resumed; %s break still awaiting confirmation",
                    self._last_break_kind,
                )
            else:
                self._activate_locked(now, events)
                self._logger.info("Breaks resumed")
            return True, REASON_RESUMED

        for segment in (self._micro, self._long):
            if segment.is_running:
                segment.pause(now)
        self._phase = PHASE_PAUSED
        self._logger.info(
            "Breaks paused: micro_accumulated=%.1fs long_accumulated=%.1fs",
            self._micro.accumulated,
            self._long.accumulated,
        )
        return True, REASON_PAUSED

    def _manual_break_locked(
        self,
        now: float,
        events: list[SchedulerEvent],
        kind: str,
    ) -> tuple[bool, str]:
        if kind not in BREAK_KINDS:
            return False, REASON_UNKNOWN_KIND
        if self._phase == PHASE_AWAITING_CONFIRMATION:
            return False, REASON_AWAITING
        if self._phase not in ACTIVE_PHASES:
            return False, REASON_NOT_ACTIVE

        self._logger.info("Manual %s break requested", kind)
        self._fire_locked(kind, now, events)
        return True, REASON_BREAK_STARTED

    def _confirm_break_locked(
        self,
        now: float,
        events: list[SchedulerEvent],
    ) -> tuple[bool, str]:
        kind = self._last_break_kind
        if kind is None or self._phase not in (
            PHASE_AWAITING_CONFIRMATION,
            PHASE_PAUSED,
        ):
            return False, REASON_NOT_AWAITING

        if kind == KIND_MICRO:
            self._micro_taken += 1
            self._micro_in_cycle += 1
        else:
            self._long_taken += 1
            self._micro_in_cycle = 0

        self._segment_locked(kind).reset()
        self._last_break_kind = None
        self._logger.info(
            "%s break confirmed: micro_taken=%d long_taken=%d cycle=%d",
            kind.capitalize(),
            self._micro_taken,
            self._long_taken,
            self._micro_in_cycle,
        )

        if self._phase == PHASE_PAUSED:
            self._logger.info("Breaks are paused; not re-arming after confirmation")
        else:
            self._activate_locked(now, events)
        return True, REASON_CONFIRMED

    def _reset_locked(
        self,
        now: float,
        events: list[SchedulerEvent],
    ) -> tuple[bool, str]:
        self._micro.reset()
        self._long.reset()
        self._last_break_kind = None
        self._micro_taken = 0
        self._long_taken = 0
        self._micro_in_cycle = 0
        self._phase = PHASE_INACTIVE
        self._logger.info("All break timers and session counters reset")
        self._activate_locked(now, events)
        return True, REASON_RESET

    def _reconfigure_locked(
        self,
        now: float,
        events: list[SchedulerEvent],
        config: BreakConfig,
    ) -> tuple[bool, str]:
        del now, events
        self._pending_config = config
        self._logger.info("Break settings updated; applying on next activation")
        return True, REASON_RECONFIGURED
