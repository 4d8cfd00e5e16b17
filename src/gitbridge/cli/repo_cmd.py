"""CLI command handlers for repo.* operations."""

from __future__ import annotations

import sys
from collections.abc import Callable
from functools import partial
from pathlib import Path
from typing import Any

from gitbridge.lib.ops._runtime import get_runtime
from gitbridge.lib.ops.registry import get_cli_operations
from gitbridge.lib.ops.repo import (
    RepoOpenInput,
    RepoShowInput,
    repo_open_sync,
    repo_show_sync,
)
from gitbridge.lib.session import choose_repository

Emitter = Callable[[Any], None]
InputAllowed = Callable[[], bool]


def _prompt_for_path() -> Path | None:
    try:
        raw = input("Repository path (empty to cancel): ")
    except EOFError:
        return None
    stripped = raw.strip()
    return Path(stripped) if stripped else None


def _notify(message: str) -> None:
    print(message, file=sys.stderr)


def _repo_open(emit: Emitter, input_allowed: InputAllowed, path: str | None = None) -> None:
    if path is not None:
        emit(repo_open_sync(RepoOpenInput(path=path)))
        return

    if not input_allowed():
        raise ValueError("Repository path is required when --no-input is set.")
    selected = choose_repository(get_runtime().session, _prompt_for_path, _notify)
    if selected is None:
        raise ValueError("Repository selection cancelled.")
    emit(repo_show_sync(RepoShowInput()))


def _repo_show(emit: Emitter) -> None:
    emit(repo_show_sync(RepoShowInput()))


def register_repo_commands(
    app: Any,
    emit: Emitter,
    input_allowed: InputAllowed,
) -> tuple[set[str], dict[str, str]]:
    handlers: dict[str, Callable[[], Callable[..., None]]] = {
        "repo.open": lambda: partial(_repo_open, emit, input_allowed),
        "repo.show": lambda: partial(_repo_show, emit),
    }

    registered: set[str] = set()
    descriptions: dict[str, str] = {}

    for op in get_cli_operations("repo"):
        handler_factory = handlers.get(op.name)
        if handler_factory is None:
            raise ValueError(f"No CLI handler registered for operation '{op.name}'")
        handler = handler_factory()
        handler.__name__ = f"cmd_{op.cli_group}_{op.cli_name}"
        app.command(handler, name=op.cli_name, help=op.description)
        registered.add(op.cli_key)
        descriptions[op.name] = op.description

    return registered, descriptions
