"""CLI command handlers for git.* operations."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from functools import partial
from typing import Any

from gitbridge.lib.ops.git import CallGitInput, call_git
from gitbridge.lib.ops.registry import get_cli_operations

Emitter = Callable[[Any], None]

# Global flags such as -v and --json are stripped before `--` only.
_CALL_HINT = "Put -- before git arguments: gitbridge git call -- log -v"


def _git_call(emit: Emitter, *args: str) -> None:
    """Run a git subcommand; put `--` before arguments that start with a dash."""

    emit(json.loads(asyncio.run(call_git(CallGitInput(args=args)))))


def register_git_commands(app: Any, emit: Emitter) -> tuple[set[str], dict[str, str]]:
    handlers: dict[str, Callable[[], Callable[..., None]]] = {
        "git.call": lambda: partial(_git_call, emit),
    }

    registered: set[str] = set()
    descriptions: dict[str, str] = {}

    for op in get_cli_operations("git"):
        handler_factory = handlers.get(op.name)
        if handler_factory is None:
            raise ValueError(f"No CLI handler registered for operation '{op.name}'")
        handler = handler_factory()
        handler.__name__ = f"cmd_{op.cli_group}_{op.cli_name}"
        help_text = f"{op.description} {_CALL_HINT}" if op.name == "git.call" else op.description
        app.command(handler, name=op.cli_name, help=help_text)
        registered.add(op.cli_key)
        descriptions[op.name] = op.description

    return registered, descriptions
