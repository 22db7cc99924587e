"""Runtime engine exports."""

from .commands import RuntimeCommandDispatcher
from .loop import RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from .ui import RuntimeUIPublisher, stats_payload

__all__ = [
    "RuntimeBootstrap",
    "RuntimeCommandDispatcher",
    "RuntimeEngine",
    "RuntimeHooks",
    "RuntimeUIPublisher",
    "stats_payload",
]
