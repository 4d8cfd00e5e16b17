"""CLI command handlers for fs.* operations."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from functools import partial
from typing import Any

from gitbridge.lib.ops.files import (
    FilePathInput,
    WriteFileInput,
    file_delete,
    file_exists,
    file_read,
    file_write,
)
from gitbridge.lib.ops.registry import get_cli_operations

Emitter = Callable[[Any], None]


def _fs_exists(emit: Emitter, path: str) -> None:
    emit(json.loads(asyncio.run(file_exists(FilePathInput(path=path)))))


def _fs_read(emit: Emitter, path: str) -> None:
    emit(json.loads(asyncio.run(file_read(FilePathInput(path=path)))))


def _fs_write(emit: Emitter, path: str, content: str) -> None:
    asyncio.run(file_write(WriteFileInput(path=path, content=content)))
    emit({"path": path, "written": True})


def _fs_delete(emit: Emitter, path: str) -> None:
    asyncio.run(file_delete(FilePathInput(path=path)))
    emit({"path": path, "deleted": True})


def register_fs_commands(app: Any, emit: Emitter) -> tuple[set[str], dict[str, str]]:
    handlers: dict[str, Callable[[], Callable[..., None]]] = {
        "fs.exists": lambda: partial(_fs_exists, emit),
        "fs.read": lambda: partial(_fs_read, emit),
        "fs.write": lambda: partial(_fs_write, emit),
        "fs.delete": lambda: partial(_fs_delete, emit),
    }

    registered: set[str] = set()
    descriptions: dict[str, str] = {}

    for op in get_cli_operations("fs"):
        handler_factory = handlers.get(op.name)
        if handler_factory is None:
            raise ValueError(f"No CLI handler registered for operation '{op.name}'")
        handler = handler_factory()
        handler.__name__ = f"cmd_{op.cli_group}_{op.cli_name}"
        app.command(handler, name=op.cli_name, help=op.description)
        registered.add(op.cli_key)
        descriptions[op.name] = op.description

    return registered, descriptions
