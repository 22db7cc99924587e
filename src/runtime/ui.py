from __future__ import annotations

from typing import Any, Optional, Protocol

from breaks import BreakStats
from contracts.ui_protocol import (
    EVENT_BREAK_STARTED,
    EVENT_COMMAND_RESULT,
    EVENT_MENU_REFRESH,
    EVENT_STATS,
)

from .messages import break_label, break_message, cycle_message, status_title


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...

    def forget(self, event_type: str) -> None:
        ...


def stats_payload(stats: BreakStats) -> dict[str, Any]:
    next_kind, next_seconds = stats.next_break
    return {
        "phase": stats.phase,
        "micro_taken": stats.micro_taken,
        "long_taken": stats.long_taken,
        "time_until_micro_seconds": round(stats.time_until_micro, 1),
        "time_until_long_seconds": round(stats.time_until_long, 1),
        "current_break_kind": stats.current_break_kind,
        "micro_in_cycle": stats.micro_in_cycle,
        "max_micro_per_long_cycle": stats.max_micro_per_long_cycle,
        "next_break_kind": next_kind,
        "next_break_seconds": round(next_seconds, 1),
        "title": status_title(stats),
    }


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_break_started(
        self,
        kind: str,
        duration_seconds: float,
        stats: BreakStats,
    ) -> None:
        self.publish(
            EVENT_BREAK_STARTED,
            kind=kind,
            label=break_label(kind),
            duration_seconds=duration_seconds,
            message=break_message(kind, duration_seconds),
            stats=stats_payload(stats),
        )

    def publish_menu_refresh(self, stats: BreakStats) -> None:
        if stats.current_break_kind is None and self._ui_server:
            self._ui_server.forget(EVENT_BREAK_STARTED)
        self.publish(EVENT_MENU_REFRESH, stats=stats_payload(stats))

    def publish_stats(self, stats: BreakStats) -> None:
        self.publish(
            EVENT_STATS,
            stats=stats_payload(stats),
            message=cycle_message(stats),
        )

    def publish_command_result(
        self,
        *,
        command: str,
        accepted: bool,
        reason: str,
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "command": command,
            "accepted": accepted,
            "reason": reason,
        }
        if message:
            payload["message"] = message
        self.publish(EVENT_COMMAND_RESULT, **payload)
