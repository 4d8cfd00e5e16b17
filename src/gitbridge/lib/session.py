"""Active repository root ownership and selection."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import structlog

from gitbridge.lib.config._paths import is_git_repository, resolve_repo_root_override
from gitbridge.lib.exec.errors import InvalidRepository, NoActiveRepository
from gitbridge.lib.state.settings_store import SettingsStore

NOT_A_REPOSITORY_MESSAGE = "Not a Git repository!"

logger = structlog.get_logger(__name__)


class RepositorySession:
    """Owns the active root shared by every boundary call.

    The root is read once from persisted settings at startup and replaced only
    by `select`. Calls snapshot it via `require_root` when they start; a
    selection racing an in-flight call does not affect that call.
    """

    def __init__(self, store: SettingsStore, root: Path | None = None) -> None:
        self._store = store
        self._root = root

    @classmethod
    def load(cls, store: SettingsStore) -> RepositorySession:
        override = resolve_repo_root_override()
        if override is not None:
            return cls(store, override)
        return cls(store, store.get_repo_path())

    @property
    def root(self) -> Path | None:
        return self._root

    def require_root(self) -> Path:
        if self._root is None:
            raise NoActiveRepository()
        return self._root

    def select(self, path: Path) -> Path:
        """Switch to `path` and persist it, or raise `InvalidRepository`."""

        candidate = path.expanduser().resolve()
        if not is_git_repository(candidate):
            raise InvalidRepository(candidate)
        self._store.set_repo_path(candidate)
        self._root = candidate
        logger.info("Active repository changed.", repo_root=str(candidate))
        return candidate


def choose_repository(
    session: RepositorySession,
    prompt: Callable[[], Path | None],
    notify: Callable[[str], None],
) -> Path | None:
    """Prompt until a valid repository is picked or the prompt is cancelled.

    Invalid picks leave the session untouched, call `notify` and prompt again.
    Returns the selected root, or None when `prompt` returns None.
    """

    while True:
        picked = prompt()
        if picked is None:
            return None
        try:
            return session.select(picked)
        except InvalidRepository as exc:
            logger.info("Rejected repository selection.", path=exc.path)
            notify(NOT_A_REPOSITORY_MESSAGE)
