import logging
import unittest
from unittest.mock import patch

from idle.config import IdleConfig
from idle.errors import IdleSourceConfigurationError, IdleSourceDependencyError
from idle.providers import build_idle_source
from idle.sources import NullIdleSource


class IdleConfigTests(unittest.TestCase):
    def test_rejects_unknown_backend(self) -> None:
        with self.assertRaises(IdleSourceConfigurationError):
            IdleConfig(backend="wayland")

    def test_rejects_non_positive_threshold(self) -> None:
        with self.assertRaises(IdleSourceConfigurationError):
            IdleConfig(threshold_seconds=0)


class IdleProvidersTests(unittest.TestCase):
    def test_disabled_config_returns_null_source(self) -> None:
        with patch("idle.providers.XPrintIdleSource") as xprintidle_cls:
            source = build_idle_source(
                IdleConfig(enabled=False),
                logger=logging.getLogger("test"),
                platform="linux",
            )

        self.assertIsInstance(source, NullIdleSource)
        xprintidle_cls.assert_not_called()

    def test_none_backend_returns_null_source(self) -> None:
        source = build_idle_source(
            IdleConfig(backend="none"),
            logger=logging.getLogger("test"),
        )

        self.assertIsNone(source.current_idle_seconds())

    def test_auto_backend_selects_by_platform(self) -> None:
        cases = (
            ("darwin", "idle.providers.MacOSIdleSource"),
            ("win32", "idle.providers.WindowsIdleSource"),
            ("linux", "idle.providers.XPrintIdleSource"),
        )
        for platform, target in cases:
            with self.subTest(platform=platform):
                sentinel = object()
                with patch(target, return_value=sentinel) as source_cls:
                    source = build_idle_source(
                        IdleConfig(backend="auto"),
                        logger=logging.getLogger("test"),
                        platform=platform,
                    )

                self.assertIs(sentinel, source)
                source_cls.assert_called_once()

    def test_explicit_backend_overrides_platform(self) -> None:
        sentinel = object()
        with patch("idle.providers.XPrintIdleSource", return_value=sentinel) as source_cls:
            source = build_idle_source(
                IdleConfig(backend="xprintidle", command_timeout_seconds=0.5),
                logger=logging.getLogger("test"),
                platform="darwin",
            )

        self.assertIs(sentinel, source)
        self.assertEqual(0.5, source_cls.call_args.kwargs["timeout_seconds"])

    def test_dependency_error_degrades_to_null_source(self) -> None:
        with patch(
            "idle.providers.XPrintIdleSource",
            side_effect=IdleSourceDependencyError("missing"),
        ):
            with self.assertLogs("test", level="WARNING") as logs:
                source = build_idle_source(
                    IdleConfig(),
                    logger=logging.getLogger("test"),
                    platform="linux",
                )

        self.assertIsInstance(source, NullIdleSource)
        self.assertIn("Idle detection unavailable", logs.output[0])


if __name__ == "__main__":
    unittest.main()
