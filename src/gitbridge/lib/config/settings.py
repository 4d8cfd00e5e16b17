"""Operational config for the git bridge.

Values come from defaults, then `<home>/config.toml`, then `GITBRIDGE_*`
environment variables:

    [git]
    executable = "git"

    [retry]
    max_retries = 3
    initial_delay_seconds = 0.1
    backoff_multiplier = 2.0

Top-level keys using the dataclass field names are accepted too.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, cast

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"


@dataclass(frozen=True, slots=True)
class GitBridgeConfig:
    git_executable: str = "git"
    max_retries: int = 3
    retry_initial_delay_seconds: float = 0.1
    retry_backoff_multiplier: float = 2.0


_FIELD_TYPES: dict[str, type] = {
    "git_executable": str,
    "max_retries": int,
    "retry_initial_delay_seconds": float,
    "retry_backoff_multiplier": float,
}

# (section, key) -> field; a None section is a top-level key.
_TOML_KEYS: dict[tuple[str | None, str], str] = {
    ("git", "executable"): "git_executable",
    ("retry", "max_retries"): "max_retries",
    ("retry", "initial_delay_seconds"): "retry_initial_delay_seconds",
    ("retry", "backoff_multiplier"): "retry_backoff_multiplier",
    **{(None, name): name for name in _FIELD_TYPES},
}
_SECTIONS = frozenset(section for section, _ in _TOML_KEYS if section is not None)

_ENV_VARS: dict[str, str] = {
    "GITBRIDGE_GIT_EXECUTABLE": "git_executable",
    "GITBRIDGE_MAX_RETRIES": "max_retries",
    "GITBRIDGE_RETRY_INITIAL_DELAY_SECONDS": "retry_initial_delay_seconds",
    "GITBRIDGE_RETRY_BACKOFF_MULTIPLIER": "retry_backoff_multiplier",
}


def _from_toml(field_name: str, raw: object, source: str) -> object:
    expected = _FIELD_TYPES[field_name]
    # bool is an int subclass; TOML booleans are never numbers here.
    if isinstance(raw, bool):
        valid = False
    elif expected is float:
        valid = isinstance(raw, int | float)
    else:
        valid = isinstance(raw, expected)
    if not valid:
        raise ValueError(
            f"Invalid value for '{source}': expected {expected.__name__}, got "
            f"{type(raw).__name__} ({raw!r})."
        )
    if expected is str:
        text = cast("str", raw).strip()
        if not text:
            raise ValueError(f"Invalid value for '{source}': expected non-empty string.")
        return text
    return expected(raw)


def _from_env(field_name: str, raw: str, env_name: str) -> object:
    expected = _FIELD_TYPES[field_name]
    text = raw.strip()
    if expected is str:
        if not text:
            raise ValueError(
                f"Invalid environment override '{env_name}': expected non-empty string."
            )
        return text
    try:
        return expected(text)
    except ValueError as error:
        raise ValueError(
            f"Invalid environment override '{env_name}': expected "
            f"{expected.__name__}, got {raw!r}."
        ) from error


def _toml_overrides(payload: dict[str, Any], path: Path) -> dict[str, object]:
    entries: list[tuple[str | None, str, object]] = []
    for key, value in payload.items():
        if key in _SECTIONS:
            if not isinstance(value, dict):
                raise ValueError(f"Invalid value for '{key}' in '{path}': expected table.")
            entries.extend((key, inner, item) for inner, item in value.items())
        else:
            entries.append((None, key, value))

    overrides: dict[str, object] = {}
    for section, key, value in entries:
        source = key if section is None else f"{section}.{key}"
        field_name = _TOML_KEYS.get((section, key))
        if field_name is None:
            logger.warning("Ignoring unknown gitbridge config key '%s'.", source)
            continue
        overrides[field_name] = _from_toml(field_name, value, source)
    return overrides


def _env_overrides() -> dict[str, object]:
    overrides: dict[str, object] = {}
    for env_name, field_name in _ENV_VARS.items():
        raw = os.getenv(env_name)
        if raw is not None:
            overrides[field_name] = _from_env(field_name, raw, env_name)
    return overrides


def _validate(config: GitBridgeConfig) -> GitBridgeConfig:
    if config.max_retries < 0:
        raise ValueError(f"Invalid max_retries: expected >= 0, got {config.max_retries}.")
    if config.retry_initial_delay_seconds < 0:
        raise ValueError(
            "Invalid retry_initial_delay_seconds: expected >= 0, got "
            f"{config.retry_initial_delay_seconds}."
        )
    if config.retry_backoff_multiplier < 1:
        raise ValueError(
            "Invalid retry_backoff_multiplier: expected >= 1, got "
            f"{config.retry_backoff_multiplier}."
        )
    return config


def load_config(home: Path) -> GitBridgeConfig:
    """Load `<home>/config.toml` and apply environment overrides."""

    overrides: dict[str, object] = {}
    path = home / CONFIG_FILENAME
    if path.is_file():
        overrides.update(_toml_overrides(tomllib.loads(path.read_text(encoding="utf-8")), path))
    overrides.update(_env_overrides())
    return _validate(replace(GitBridgeConfig(), **cast("dict[str, Any]", overrides)))
