import argparse
import logging
import signal
from queue import Queue
from typing import Any, Callable, Optional, Sequence

from app_config import (
    AppConfigurationError,
    UIServerSettings,
    load_app_config,
    resolve_config_path,
)
from breaks import BreakConfig, BreakScheduler, QueueEventPublisher
from idle import IdleConfig, IdleSourceConfigurationError, build_idle_source
from runtime import RuntimeBootstrap, RuntimeEngine, RuntimeHooks, stats_payload
from server import ClientCommand, ServerConfigurationError, UIServer, UIServerConfig


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("breakwatch")


def setup_signal_handlers(engine: RuntimeEngine) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        signal_name = signal.Signals(signum).name
        logging.getLogger("breakwatch").info("%s received, stopping...", signal_name)
        engine.request_stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="breakwatch",
        description="Schedule micro and long screen breaks.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.toml (defaults to $BREAKWATCH_CONFIG_FILE or ./config.toml)",
    )
    return parser


def start_ui_server(
    settings: UIServerSettings,
    *,
    on_command: Callable[[ClientCommand], None],
    stats_provider: Callable[[], dict[str, Any]],
    logger: logging.Logger,
) -> Optional[UIServer]:
    """Start the presenter websocket server; failures leave the app headless."""
    try:
        config = UIServerConfig.from_settings(settings)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        return None
    if not config.enabled:
        logger.info("UI server disabled")
        return None

    ui_server = UIServer(
        config,
        on_command=on_command,
        stats_provider=stats_provider,
        logger=logging.getLogger("ui_server"),
    )
    try:
        ui_server.start(timeout_seconds=5.0)
    except RuntimeError as error:
        logger.error("UI server startup error: %s", error)
        logger.warning("Continuing without UI server.")
        return None
    return ui_server


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the break scheduler until interrupted."""
    args = build_arg_parser().parse_args(argv)
    logger = setup_logging(level=logging.INFO)

    try:
        app_config = load_app_config(args.config)
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(app_config.runtime.log_level)
    if app_config.source_file:
        logger.info("Loaded runtime config: %s", app_config.source_file)
    else:
        logger.info(
            "No config file at %s; using defaults",
            resolve_config_path(args.config),
        )

    try:
        break_config = BreakConfig.from_settings(app_config.breaks, app_config.idle)
        idle_config = IdleConfig.from_settings(app_config.idle)
    except (ValueError, IdleSourceConfigurationError) as error:
        logger.error("Configuration error: %s", error)
        return 1

    idle_source = build_idle_source(idle_config, logger=logging.getLogger("idle"))

    event_queue: Queue[Any] = Queue()
    scheduler = BreakScheduler(
        break_config,
        idle_source=idle_source,
        publisher=QueueEventPublisher(event_queue),
        logger=logging.getLogger("breaks"),
    )

    ui_server = start_ui_server(
        app_config.ui_server,
        on_command=event_queue.put,
        stats_provider=lambda: stats_payload(scheduler.stats()),
        logger=logger,
    )

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logging.getLogger("runtime"),
            scheduler=scheduler,
            event_queue=event_queue,
            ui_server=ui_server,
            tick_interval_seconds=app_config.runtime.tick_interval_seconds,
            hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
        )
    )
    return engine.run()


if __name__ == "__main__":
    raise SystemExit(main())
