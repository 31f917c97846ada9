"""String key/value media backing the statistics store."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

APP_DATA_DIR_NAME = "PomodoroTech"
DEFAULT_DATA_FILE = "stats.json"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


def user_data_dir(app_name: str = APP_DATA_DIR_NAME) -> Path:
    """Return the per-user data dir (Windows/macOS/Linux)."""
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA", os.path.expanduser("~\\AppData\\Local"))
    elif os.name == "posix":
        base = os.environ.get("XDG_DATA_HOME", os.path.expanduser("~/.local/share"))
    else:
        base = os.path.expanduser("~")
    return Path(base) / app_name


def default_data_file() -> Path:
    return user_data_dir() / DEFAULT_DATA_FILE


class InMemoryKeyValueStore:
    """Process-local store, mostly for tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def keys(self) -> list[str]:
        return sorted(self._values)


class JsonFileKeyValueStore:
    """Whole key space kept in one JSON object file, rewritten atomically on set.

    A missing file reads as empty. A file that does not parse is renamed to
    `<name>.corrupt-<stamp>` before anything is written, so other days are
    never overwritten. A file that cannot be read reads as empty, but writes
    raise until it can be.
    """

    def __init__(self, path: Path, logger: Optional[logging.Logger] = None):
        self._path = Path(path)
        self._logger = logger or logging.getLogger("stats.backend")
        self._values: Optional[dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        if self._values is None:
            self._values = self._read_file()
        values = dict(self._values)
        values[key] = value
        self._write(values)
        self._values = values

    def keys(self) -> list[str]:
        return sorted(self._load())

    def _load(self) -> dict[str, str]:
        if self._values is not None:
            return self._values
        try:
            self._values = self._read_file()
        except OSError as error:
            self._logger.warning("Cannot read stats file %s, treating as empty: %s", self._path, error)
            return {}
        return self._values

    def _read_file(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        data = self._path.read_bytes()
        try:
            raw = json.loads(data.decode("utf-8"))
        except ValueError as error:
            self._quarantine(f"invalid JSON ({error})")
            return {}

        if not isinstance(raw, dict):
            self._quarantine("root is not an object")
            return {}

        return {str(key): value for key, value in raw.items() if isinstance(value, str)}

    def _quarantine(self, reason: str) -> None:
        stamp = datetime.now().strftime("%Y%m%dT%H%M%S%f")
        target = self._path.with_name(f"{self._path.name}.corrupt-{stamp}")
        os.replace(self._path, target)
        self._logger.warning(
            "Stats file %s is unusable (%s); moved it to %s and starting empty",
            self._path,
            reason,
            target,
        )

    def _write(self, values: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=str(self._path.parent),
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(values, fh, indent=2, sort_keys=True)
            os.replace(temp_name, self._path)
        except OSError:
            with contextlib.suppress(OSError):
                os.unlink(temp_name)
            raise
