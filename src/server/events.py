"""JSON envelopes for presenter events and the replay cache for late joiners."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def make_event(
    event_type: str,
    *,
    now_fn: Optional[Callable[[], datetime]] = None,
    **payload: Any,
) -> str:
    envelope: dict[str, Any] = {
        "type": event_type,
        "timestamp": (now_fn or _utc_now)().isoformat(),
    }
    envelope.update(payload)
    return json.dumps(envelope)


class StickyEventStore:
    """Latest message per sticky event type, replayed when a presenter connects.

    Only ``STICKY_EVENT_TYPES`` are kept; replay follows ``STICKY_EVENT_ORDER``
    so a reconnecting presenter sees a pending break before the menu state.
    """

    def __init__(self):
        self._latest: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> bool:
        if event_type not in STICKY_EVENT_TYPES:
            return False
        with self._lock:
            self._latest[event_type] = message
        return True

    def forget(self, event_type: str) -> None:
        with self._lock:
            self._latest.pop(event_type, None)

    def snapshot(self) -> list[str]:
        with self._lock:
            latest = dict(self._latest)
        return [latest[event_type] for event_type in STICKY_EVENT_ORDER if event_type in latest]
