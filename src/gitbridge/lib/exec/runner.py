"""Async git subprocess execution with combined output capture."""

from __future__ import annotations

import asyncio
import codecs
import shlex
from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

from gitbridge.lib.exec.errors import SPAWN_FAILURE_EXIT_CODE, BoundaryArgumentError, ProcessFailure
from gitbridge.lib.logging import observe_call

DEFAULT_GIT_EXECUTABLE = "git"
_READ_CHUNK_SIZE = 64 * 1024

logger = structlog.get_logger(__name__)


async def _capture_stream(reader: asyncio.StreamReader, chunks: list[str]) -> None:
    # One decoder per stream so a multi-byte character split across reads
    # from the same pipe is reassembled before it reaches the shared buffer.
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await reader.read(_READ_CHUNK_SIZE)
        if not chunk:
            break
        text = decoder.decode(chunk)
        if text:
            chunks.append(text)
    tail = decoder.decode(b"", final=True)
    if tail:
        chunks.append(tail)


async def _spawn_and_collect(
    command: tuple[str, ...],
    *,
    cwd: Path,
    env: Mapping[str, str] | None,
) -> str:
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        # A stale active root fails here too; name the directory, not git.
        subject = f"working directory {cwd}" if not cwd.is_dir() else command[0]
        message = f"{subject}: {exc.strerror or exc}"
        raise ProcessFailure(SPAWN_FAILURE_EXIT_CODE, message) from exc
    if process.stdout is None or process.stderr is None:
        raise RuntimeError("Subprocess did not expose stdout/stderr pipes.")

    chunks: list[str] = []
    await asyncio.gather(
        _capture_stream(process.stdout, chunks),
        _capture_stream(process.stderr, chunks),
    )
    return_code = await process.wait()

    output = "".join(chunks)
    if return_code != 0:
        logger.debug("git exited nonzero.", command=list(command), exit_code=return_code)
        raise ProcessFailure(return_code, output)
    return output


async def run_git(
    args: Sequence[str],
    *,
    cwd: Path,
    executable: str = DEFAULT_GIT_EXECUTABLE,
    env: Mapping[str, str] | None = None,
) -> str:
    """Run one git invocation and return its combined stdout/stderr text.

    Raises `ProcessFailure` carrying the same combined text when the process
    exits nonzero. Output from the two streams is concatenated in arrival
    order; their relative interleaving is not guaranteed.
    """

    if not args:
        raise BoundaryArgumentError("call-git requires at least one argument.")

    command = (executable, *args)
    return await observe_call(
        shlex.join(command),
        _spawn_and_collect(command, cwd=cwd, env=env),
    )
