"""Persisted key-value settings record surviving restarts."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import TypeAlias, cast

import structlog

SETTINGS_FILENAME = "settings.json"
REPO_PATH_KEY = "repo_path"

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

logger = structlog.get_logger(__name__)


def _atomic_write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


class SettingsStore:
    """JSON object stored at `<home>/settings.json`.

    A missing or malformed file reads as empty; every `set` rewrites the
    whole record atomically.
    """

    def __init__(self, home: Path) -> None:
        self.path = home / SETTINGS_FILENAME

    def load(self) -> dict[str, JSONValue]:
        if not self.path.is_file():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable settings file.", path=str(self.path), exc_info=True)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring settings file without a JSON object.", path=str(self.path))
            return {}
        return cast("dict[str, JSONValue]", payload)

    def get(self, key: str) -> JSONValue:
        return self.load().get(key)

    def set(self, key: str, value: JSONValue) -> None:
        payload = self.load()
        payload[key] = value
        _atomic_write_text(self.path, json.dumps(payload, indent=2, sort_keys=True) + "\n")

    def get_repo_path(self) -> Path | None:
        value = self.get(REPO_PATH_KEY)
        if not isinstance(value, str) or not value.strip():
            return None
        return Path(value)

    def set_repo_path(self, path: Path) -> None:
        self.set(REPO_PATH_KEY, path.as_posix())
