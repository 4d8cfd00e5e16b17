"""Path resolution helpers for gitbridge state and repository roots."""

from __future__ import annotations

import os
from pathlib import Path

_APP_DIR_NAME = "gitbridge"
_REPOSITORY_MARKER = ".git"


def resolve_state_home() -> Path:
    """Resolve the directory holding `config.toml` and `settings.json`.

    Precedence:
    1. `GITBRIDGE_HOME` environment variable.
    2. `$XDG_CONFIG_HOME/gitbridge`.
    3. `~/.config/gitbridge`.
    """

    override = os.getenv("GITBRIDGE_HOME", "").strip()
    if override:
        return Path(override).expanduser().resolve()

    xdg_home = os.getenv("XDG_CONFIG_HOME", "").strip()
    if xdg_home:
        return Path(xdg_home).expanduser().resolve() / _APP_DIR_NAME
    return Path.home() / ".config" / _APP_DIR_NAME


def resolve_repo_root_override() -> Path | None:
    """Return the `GITBRIDGE_REPO_ROOT` override, when set."""

    env_root = os.getenv("GITBRIDGE_REPO_ROOT", "").strip()
    if not env_root:
        return None
    return Path(env_root).expanduser().resolve()


def is_git_repository(path: Path) -> bool:
    """Return whether `path` is a directory holding a `.git` directory.

    Worktrees and submodules use a `.git` file and are not accepted.
    """

    return (path / _REPOSITORY_MARKER).is_dir()
