"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class TimerSettings:
    """Countdown settings from `[timer]`."""
    test_mode: bool = False
    tick_period_ms: int = 1000


@dataclass(frozen=True)
class StatsSettings:
    """Statistics storage settings from `[stats]`."""
    data_file: str = ""
    timezone: str = ""


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class LoggingSettings:
    """Root log level from `[logging]`."""
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    timer: TimerSettings
    stats: StatsSettings
    ui_server: UIServerSettings
    logging: LoggingSettings
    source_file: str
