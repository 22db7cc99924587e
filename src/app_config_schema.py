"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class BreakSettings:
    """Break intervals and break lengths in seconds from `[breaks]`."""
    micro_interval_seconds: float = 20 * 60
    micro_duration_seconds: float = 20
    long_interval_seconds: float = 60 * 60
    long_duration_seconds: float = 10 * 60


@dataclass(frozen=True)
class IdleSettings:
    """System idle detection settings from `[idle]`."""
    enabled: bool = True
    threshold_seconds: float = 60.0
    backend: str = "auto"
    command_timeout_seconds: float = 2.0


@dataclass(frozen=True)
class RuntimeSettings:
    """Scheduling loop settings from `[runtime]`."""
    tick_interval_seconds: float = 1.0
    log_level: str = "INFO"


@dataclass(frozen=True)
class UIServerSettings:
    """Websocket event server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765


@dataclass(frozen=True)
class AppConfig:
    """Top-level immutable application config assembled from config.toml."""
    breaks: BreakSettings = field(default_factory=BreakSettings)
    idle: IdleSettings = field(default_factory=IdleSettings)
    runtime: RuntimeSettings = field(default_factory=RuntimeSettings)
    ui_server: UIServerSettings = field(default_factory=UIServerSettings)
    source_file: str = ""
