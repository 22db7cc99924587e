"""Factory for building the configured system idle source."""

from __future__ import annotations

import logging
import sys

from .config import (
    BACKEND_AUTO,
    BACKEND_MACOS,
    BACKEND_NONE,
    BACKEND_WINDOWS,
    BACKEND_XPRINTIDLE,
    IdleConfig,
)
from .errors import IdleSourceError
from .sources import MacOSIdleSource, NullIdleSource, WindowsIdleSource, XPrintIdleSource


def _auto_backend(platform: str) -> str:
    if platform == "darwin":
        return BACKEND_MACOS
    if platform.startswith("win"):
        return BACKEND_WINDOWS
    return BACKEND_XPRINTIDLE


def build_idle_source(
    config: IdleConfig,
    *,
    logger: logging.Logger,
    platform: str | None = None,
):
    """Initialize the configured idle source and degrade gracefully on failures."""
    if not config.enabled or config.backend == BACKEND_NONE:
        logger.info("Idle detection disabled")
        return NullIdleSource()

    backend = config.backend
    if backend == BACKEND_AUTO:
        backend = _auto_backend(platform or sys.platform)

    try:
        if backend == BACKEND_MACOS:
            source = MacOSIdleSource(logger=logger.getChild("macos"))
        elif backend == BACKEND_WINDOWS:
            source = WindowsIdleSource(logger=logger.getChild("windows"))
        else:
            source = XPrintIdleSource(
                timeout_seconds=config.command_timeout_seconds,
                logger=logger.getChild("xprintidle"),
            )
    except IdleSourceError as error:
        logger.warning("Idle detection unavailable (%s): %s", backend, error)
        return NullIdleSource()

    logger.info(
        "Idle detection enabled: backend=%s threshold=%ss",
        backend,
        config.threshold_seconds,
    )
    return source
