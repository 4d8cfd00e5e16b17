"""Filesystem bridge scoped to the active repository root."""

from __future__ import annotations

import asyncio
from pathlib import Path

from gitbridge.lib.exec.errors import IoFailure
from gitbridge.lib.logging import observe_call


def _require(root: Path, file_path: str) -> Path:
    """Resolve `file_path` under `root` or raise `IoFailure`."""

    try:
        candidate = (root / file_path).resolve()
        resolved_root = root.resolve()
    except (OSError, ValueError) as exc:
        # ValueError: embedded NUL byte.
        raise IoFailure(file_path, exc) from exc
    if candidate != resolved_root and not candidate.is_relative_to(resolved_root):
        raise IoFailure(file_path, "path escapes the repository root")
    return candidate


def _exists_sync(root: Path, file_path: str) -> bool:
    try:
        return _require(root, file_path).exists()
    except (IoFailure, OSError, ValueError):
        return False


def _read_sync(root: Path, file_path: str) -> str:
    target = _require(root, file_path)
    try:
        return target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise IoFailure(file_path, exc) from exc


def _write_sync(root: Path, file_path: str, content: str) -> None:
    target = _require(root, file_path)
    try:
        target.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise IoFailure(file_path, exc) from exc


def _delete_sync(root: Path, file_path: str) -> None:
    target = _require(root, file_path)
    try:
        target.unlink()
    except OSError as exc:
        raise IoFailure(file_path, exc) from exc


async def exists(root: Path, file_path: str) -> bool:
    """Return whether `file_path` exists under `root`; absence is not an error."""

    return await observe_call(
        f"exists {file_path}",
        asyncio.to_thread(_exists_sync, root, file_path),
    )


async def read_file(root: Path, file_path: str) -> str:
    return await observe_call(
        f"read-file {file_path}",
        asyncio.to_thread(_read_sync, root, file_path),
    )


async def write_file(root: Path, file_path: str, content: str) -> None:
    await observe_call(
        f"write-file {file_path}",
        asyncio.to_thread(_write_sync, root, file_path, content),
    )


async def delete_file(root: Path, file_path: str) -> None:
    await observe_call(
        f"delete-file {file_path}",
        asyncio.to_thread(_delete_sync, root, file_path),
    )
