"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import math
from typing import Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    BreakSettings,
    IdleSettings,
    RuntimeSettings,
    UIServerSettings,
)

_LOG_LEVELS = ("CRITICAL", "DEBUG", "ERROR", "INFO", "WARNING")
_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings.

    Missing sections and keys fall back to the dataclass defaults; present
    values are type-checked and reported with their dotted ``section.key``.
    """
    return AppConfig(
        breaks=_parse_breaks(_table(raw, "breaks")),
        idle=_parse_idle(_table(raw, "idle")),
        runtime=_parse_runtime(_table(raw, "runtime")),
        ui_server=_parse_ui_server(_table(raw, "ui_server")),
        source_file=source_file,
    )


def _parse_breaks(table: Mapping[str, Any]) -> BreakSettings:
    defaults = BreakSettings()
    return BreakSettings(
        micro_interval_seconds=_positive_seconds(
            table, "breaks", "micro_interval_seconds", defaults.micro_interval_seconds
        ),
        micro_duration_seconds=_positive_seconds(
            table, "breaks", "micro_duration_seconds", defaults.micro_duration_seconds
        ),
        long_interval_seconds=_positive_seconds(
            table, "breaks", "long_interval_seconds", defaults.long_interval_seconds
        ),
        long_duration_seconds=_positive_seconds(
            table, "breaks", "long_duration_seconds", defaults.long_duration_seconds
        ),
    )


def _parse_idle(table: Mapping[str, Any]) -> IdleSettings:
    defaults = IdleSettings()
    backend = _text(table, "idle", "backend", defaults.backend).lower()
    return IdleSettings(
        enabled=_flag(table, "idle", "enabled", defaults.enabled),
        threshold_seconds=_positive_seconds(
            table, "idle", "threshold_seconds", defaults.threshold_seconds
        ),
        backend=backend or defaults.backend,
        command_timeout_seconds=_positive_seconds(
            table, "idle", "command_timeout_seconds", defaults.command_timeout_seconds
        ),
    )


def _parse_runtime(table: Mapping[str, Any]) -> RuntimeSettings:
    defaults = RuntimeSettings()
    log_level = _text(table, "runtime", "log_level", defaults.log_level).upper()
    if log_level not in _LOG_LEVELS:
        raise AppConfigurationError(
            f"runtime.log_level must be one of: {', '.join(_LOG_LEVELS)}."
        )
    return RuntimeSettings(
        tick_interval_seconds=_positive_seconds(
            table, "runtime", "tick_interval_seconds", defaults.tick_interval_seconds
        ),
        log_level=log_level,
    )


def _parse_ui_server(table: Mapping[str, Any]) -> UIServerSettings:
    defaults = UIServerSettings()
    return UIServerSettings(
        enabled=_flag(table, "ui_server", "enabled", defaults.enabled),
        host=_text(table, "ui_server", "host", defaults.host),
        port=_whole_number(table, "ui_server", "port", defaults.port),
    )


def _table(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = root.get(name)
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return value
    raise AppConfigurationError(f"[{name}] must be a table.")


def _text(table: Mapping[str, Any], section: str, key: str, default: str) -> str:
    value = table.get(key, default)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise AppConfigurationError(f"{section}.{key} must be a string.")
    return value.strip()


def _flag(table: Mapping[str, Any], section: str, key: str, default: bool) -> bool:
    value = table.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
    raise AppConfigurationError(f"{section}.{key} must be a boolean.")


def _whole_number(table: Mapping[str, Any], section: str, key: str, default: int) -> int:
    value = table.get(key, default)
    # bool is an int subclass; TOML `true` is never a valid number here.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise AppConfigurationError(f"{section}.{key} must be an integer.")


def _positive_seconds(
    table: Mapping[str, Any],
    section: str,
    key: str,
    default: float,
) -> float:
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise AppConfigurationError(f"{section}.{key} must be a number.")
    try:
        seconds = float(value)
    except ValueError as error:
        raise AppConfigurationError(f"{section}.{key} must be a number.") from error
    if not math.isfinite(seconds):
        raise AppConfigurationError(f"{section}.{key} must be a finite number.")
    if seconds <= 0:
        raise AppConfigurationError(f"{section}.{key} must be greater than zero.")
    return seconds
