"""Config file discovery and loading into typed `AppConfig` settings."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Mapping

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    LoggingSettings,
    StatsSettings,
    TimerSettings,
    UIServerSettings,
)

CONFIG_FILE_ENV = "APP_CONFIG_FILE"
TEST_MODE_ENV = "POMODORO_TEST_MODE"

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "load_app_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv(CONFIG_FILE_ENV)
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    if path.exists():
        return path

    # Packaged fallback: use bundled config.toml when no explicit path is provided.
    if config_path is None and env_path is None:
        bundle_root = Path(getattr(sys, "_MEIPASS", ""))
        if str(bundle_root):
            bundled_path = bundle_root / DEFAULT_CONFIG_FILE
            if bundled_path.exists():
                return bundled_path

    return path


def load_app_config(config_path: str | None = None) -> AppConfig:
    """Load settings; the default config file may be absent, an explicit one may not."""
    explicit = config_path is not None or os.getenv(CONFIG_FILE_ENV) is not None
    path = resolve_config_path(config_path)

    if not path.exists():
        if explicit:
            raise AppConfigurationError(f"Config file not found: {path}")
        return _apply_env_overrides(default_app_config())
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")

    app_config = parse_app_config(raw, base_dir=path.parent, source_file=str(path))
    return _apply_env_overrides(app_config)


def default_app_config() -> AppConfig:
    return AppConfig(
        timer=TimerSettings(),
        stats=StatsSettings(),
        ui_server=UIServerSettings(),
        logging=LoggingSettings(),
        source_file="",
    )


def _apply_env_overrides(app_config: AppConfig) -> AppConfig:
    raw = os.getenv(TEST_MODE_ENV)
    if raw is None or not raw.strip():
        return app_config

    lowered = raw.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        test_mode = True
    elif lowered in ("false", "0", "no", "off"):
        test_mode = False
    else:
        raise AppConfigurationError(f"{TEST_MODE_ENV} must be a boolean, got: {raw!r}")

    timer = dataclasses.replace(app_config.timer, test_mode=test_mode)
    return dataclasses.replace(app_config, timer=timer)
