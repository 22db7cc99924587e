"""Platform adapters reporting seconds since the last user input."""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
import shutil
import subprocess
from typing import Optional

from .errors import IdleSourceDependencyError, IdleSourceReadError


class NullIdleSource:
    """Idle source used when detection is disabled or unavailable."""

    def current_idle_seconds(self) -> Optional[float]:
        return None


class MacOSIdleSource:
    """Idle time from CoreGraphics ``CGEventSourceSecondsSinceLastEventType``."""

    # kCGEventSourceStateCombinedSessionState, kCGAnyInputEventType
    _SESSION_STATE = 0
    _ANY_INPUT_EVENT = 0xFFFFFFFF

    def __init__(self, *, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("idle.macos")
        self._seconds_since_last_event = self._load_function()

    def _load_function(self):
        library_path = ctypes.util.find_library("CoreGraphics")
        if not library_path:
            raise IdleSourceDependencyError("CoreGraphics framework not found.")
        try:
            library = ctypes.cdll.LoadLibrary(library_path)
            function = library.CGEventSourceSecondsSinceLastEventType
        except (OSError, AttributeError) as error:  # pragma: no cover - macOS only
            raise IdleSourceDependencyError(
                f"Failed to load CoreGraphics idle API: {error}"
            ) from error
        function.restype = ctypes.c_double
        function.argtypes = [ctypes.c_int32, ctypes.c_uint32]
        return function

    def current_idle_seconds(self) -> Optional[float]:
        try:
            seconds = float(
                self._seconds_since_last_event(
                    self._SESSION_STATE,
                    self._ANY_INPUT_EVENT,
                )
            )
        except Exception as error:  # pragma: no cover - macOS only
            raise IdleSourceReadError(f"CoreGraphics idle query failed: {error}") from error
        return max(0.0, seconds)


class _LastInputInfo(ctypes.Structure):
    _fields_ = [("cbSize", ctypes.c_uint), ("dwTime", ctypes.c_uint)]


class WindowsIdleSource:
    """Idle time from ``GetLastInputInfo`` and ``GetTickCount``."""

    def __init__(self, *, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("idle.windows")
        windll = getattr(ctypes, "windll", None)
        if windll is None:
            raise IdleSourceDependencyError("GetLastInputInfo requires Windows.")
        self._user32 = windll.user32
        self._kernel32 = windll.kernel32

    def current_idle_seconds(self) -> Optional[float]:  # pragma: no cover - Windows only
        info = _LastInputInfo()
        info.cbSize = ctypes.sizeof(_LastInputInfo)
        if not self._user32.GetLastInputInfo(ctypes.byref(info)):
            raise IdleSourceReadError("GetLastInputInfo returned failure.")
        # Both counters are 32-bit milliseconds and wrap after ~49.7 days.
        elapsed_ms = (self._kernel32.GetTickCount() - info.dwTime) & 0xFFFFFFFF
        return elapsed_ms / 1000.0


class XPrintIdleSource:
    """Idle time from the X11 ``xprintidle`` utility (milliseconds on stdout)."""

    def __init__(
        self,
        *,
        command: str = "xprintidle",
        timeout_seconds: float = 2.0,
        logger: Optional[logging.Logger] = None,
    ):
        executable = shutil.which(command)
        if executable is None:
            raise IdleSourceDependencyError(
                f"{command} not found on PATH. Install it to enable idle detection."
            )
        self._executable = executable
        self._timeout_seconds = timeout_seconds
        self._logger = logger or logging.getLogger("idle.xprintidle")

    def current_idle_seconds(self) -> Optional[float]:
        try:
            result = subprocess.run(
                [self._executable],
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as error:
            raise IdleSourceReadError(f"xprintidle failed: {error}") from error

        raw = result.stdout.strip()
        try:
            milliseconds = int(raw)
        except ValueError as error:
            raise IdleSourceReadError(f"Unexpected xprintidle output: {raw!r}") from error
        return max(0, milliseconds) / 1000.0
