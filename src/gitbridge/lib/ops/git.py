"""Git command boundary operation."""

from __future__ import annotations

from dataclasses import dataclass

from gitbridge.lib.ops._runtime import get_runtime
from gitbridge.lib.ops.dispatch import BoundaryOperation, dispatch
from gitbridge.lib.ops.registry import OperationSpec, operation


@dataclass(frozen=True, slots=True)
class CallGitInput:
    args: tuple[str, ...] = ()


async def call_git(payload: CallGitInput) -> str:
    return await dispatch(get_runtime(), BoundaryOperation.CALL_GIT, *payload.args)


operation(
    OperationSpec(
        name="git.call",
        handler=call_git,
        input_type=CallGitInput,
        output_type=str,
        cli_group="git",
        cli_name="call",
        mcp_name=BoundaryOperation.CALL_GIT.value,
        description="Run one git subcommand in the active repository.",
    )
)
