"""Boundary dispatcher routing the fixed operation set."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, assert_never

from gitbridge.lib import files
from gitbridge.lib.exec.errors import BoundaryArgumentError, UnknownOperation
from gitbridge.lib.exec.retry import Runner, run_with_retry
from gitbridge.lib.exec.runner import run_git
from gitbridge.lib.serialization import to_transport_text

if TYPE_CHECKING:
    from gitbridge.lib.ops._runtime import BridgeRuntime


class BoundaryOperation(StrEnum):
    CALL_GIT = "call-git"
    EXISTS = "exists"
    READ_FILE = "read-file"
    WRITE_FILE = "write-file"
    DELETE_FILE = "delete-file"

    @classmethod
    def parse(cls, name: str) -> BoundaryOperation:
        try:
            return cls(name)
        except ValueError as exc:
            raise UnknownOperation(name) from exc


def _git_runner(runtime: BridgeRuntime, root: Path) -> Runner:
    executable = runtime.config.git_executable

    async def _run(args: Sequence[str]) -> str:
        return await run_git(args, cwd=root, executable=executable)

    return _run


def _expect_args(
    operation: BoundaryOperation,
    args: tuple[str, ...],
    count: int,
) -> tuple[str, ...]:
    if len(args) != count:
        raise BoundaryArgumentError(
            f"'{operation}' expects {count} argument(s), got {len(args)}."
        )
    return args


async def dispatch(runtime: BridgeRuntime, operation: BoundaryOperation, *args: str) -> str:
    """Run one boundary call and return its result as JSON text.

    The active root is read once here; every step of the call, including
    retries, uses that snapshot.
    """

    root = runtime.session.require_root()
    result: object
    match operation:
        case BoundaryOperation.CALL_GIT:
            if not args:
                raise BoundaryArgumentError("'call-git' expects at least one argument.")
            result = await run_with_retry(
                args,
                runner=_git_runner(runtime, root),
                policy=runtime.retry_policy,
            )
        case BoundaryOperation.EXISTS:
            (file_path,) = _expect_args(operation, args, 1)
            result = await files.exists(root, file_path)
        case BoundaryOperation.READ_FILE:
            (file_path,) = _expect_args(operation, args, 1)
            result = await files.read_file(root, file_path)
        case BoundaryOperation.WRITE_FILE:
            file_path, content = _expect_args(operation, args, 2)
            result = await files.write_file(root, file_path, content)
        case BoundaryOperation.DELETE_FILE:
            (file_path,) = _expect_args(operation, args, 1)
            result = await files.delete_file(root, file_path)
        case _:
            assert_never(operation)
    return to_transport_text(result)


async def handle_boundary_call(runtime: BridgeRuntime, name: str, *args: str) -> str:
    """Parse an untyped operation name, then dispatch it."""

    return await dispatch(runtime, BoundaryOperation.parse(name), *args)
