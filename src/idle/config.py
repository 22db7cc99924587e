from __future__ import annotations

from dataclasses import dataclass

from .errors import IdleSourceConfigurationError

BACKEND_AUTO = "auto"
BACKEND_MACOS = "macos"
BACKEND_WINDOWS = "windows"
BACKEND_XPRINTIDLE = "xprintidle"
BACKEND_NONE = "none"

IDLE_BACKENDS: frozenset[str] = frozenset(
    {
        BACKEND_AUTO,
        BACKEND_MACOS,
        BACKEND_WINDOWS,
        BACKEND_XPRINTIDLE,
        BACKEND_NONE,
    }
)


@dataclass(frozen=True)
class IdleConfig:
    enabled: bool = True
    threshold_seconds: float = 60.0
    backend: str = BACKEND_AUTO
    command_timeout_seconds: float = 2.0

    def __post_init__(self) -> None:
        if self.threshold_seconds <= 0:
            raise IdleSourceConfigurationError(
                f"idle.threshold_seconds must be > 0, got: {self.threshold_seconds}"
            )
        if self.backend not in IDLE_BACKENDS:
            allowed = ", ".join(sorted(IDLE_BACKENDS))
            raise IdleSourceConfigurationError(f"idle.backend must be one of: {allowed}")
        if self.command_timeout_seconds <= 0:
            raise IdleSourceConfigurationError("idle.command_timeout_seconds must be > 0")

    @classmethod
    def from_settings(cls, settings) -> "IdleConfig":
        return cls(
            enabled=bool(settings.enabled),
            threshold_seconds=float(settings.threshold_seconds),
            backend=settings.backend.strip().lower() or BACKEND_AUTO,
            command_timeout_seconds=float(settings.command_timeout_seconds),
        )
