import logging
import signal
import time
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from app_config import AppConfigurationError, load_app_config, resolve_config_path
from app_config_parser import log_level
from app_config_schema import AppConfig
from pomodoro import PhaseDurations
from runtime import AsyncioTickSource, RuntimeUIPublisher, build_runtime
from server import ServerConfigurationError, UIServer, UIServerConfig
from stats import JsonFileKeyValueStore, StatisticsStore
from stats.backends import default_data_file


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomodoro_app")


def build_statistics_store(app_config: AppConfig) -> StatisticsStore:
    data_file = Path(app_config.stats.data_file) if app_config.stats.data_file else default_data_file()
    tz: Optional[ZoneInfo] = ZoneInfo(app_config.stats.timezone) if app_config.stats.timezone else None
    backend = JsonFileKeyValueStore(data_file, logger=logging.getLogger("stats.backend"))
    return StatisticsStore(backend, tz=tz, logger=logging.getLogger("stats"))


def main() -> int:
    """Serve the pomodoro UI until interrupted."""
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path()
        app_config = load_app_config()
        logger.info("Loaded runtime config: %s", app_config.source_file or "(defaults)")
    except AppConfigurationError as error:
        logger.error("App configuration error (%s): %s", config_path, error)
        return 1

    logging.getLogger().setLevel(log_level(app_config.logging))

    try:
        server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        return 1

    if not server_config.enabled:
        logger.info("UI server disabled via ui_server.enabled=false; nothing to drive the timer.")
        return 0

    store = build_statistics_store(app_config)
    durations = PhaseDurations.for_mode(app_config.timer.test_mode)
    if app_config.timer.test_mode:
        logger.warning("Test mode enabled: phases last %ss", durations.work)

    ui_server = UIServer(config=server_config, logger=logging.getLogger("ui_server"))
    engine = build_runtime(
        store=store,
        tick_source=AsyncioTickSource(logger=logging.getLogger("ticks")),
        ui=RuntimeUIPublisher(ui_server),
        durations=durations,
        tick_period_ms=app_config.timer.tick_period_ms,
        logger=logging.getLogger("runtime"),
    )
    ui_server.set_command_handler(engine.handle_command)

    shutdown = False

    def handle_signal(signum, frame) -> None:
        del frame
        nonlocal shutdown
        logger.info("Signal %s received, stopping.", signal.Signals(signum).name)
        shutdown = True

    try:
        ui_server.start(timeout_seconds=5.0)
        ui_server.call_soon(engine.publish_all)
        logger.info("Open http://%s:%d to use the timer. Press Ctrl+C to stop.", ui_server.host, ui_server.port)

        signal.signal(signal.SIGINT, handle_signal)
        signal.signal(signal.SIGTERM, handle_signal)

        while not shutdown:
            time.sleep(0.2)
    except RuntimeError as error:
        logger.error("UI server startup failed: %s", error)
        return 1
    except KeyboardInterrupt:
        logger.info("Stopping by user request.")
    finally:
        ui_server.stop()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
