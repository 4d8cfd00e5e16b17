"""Active repository selection operations."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from gitbridge.lib.ops._runtime import get_runtime
from gitbridge.lib.ops.registry import OperationSpec, operation


@dataclass(frozen=True, slots=True)
class RepoOpenInput:
    path: str = ""


@dataclass(frozen=True, slots=True)
class RepoShowInput:
    pass


@dataclass(frozen=True, slots=True)
class RepoStatusOutput:
    repo_root: str | None
    state_home: str

    def format_text(self) -> str:
        root = self.repo_root if self.repo_root is not None else "(none)"
        return f"Repository: {root}\nState home: {self.state_home}"


def _status() -> RepoStatusOutput:
    runtime = get_runtime()
    root = runtime.session.root
    return RepoStatusOutput(
        repo_root=root.as_posix() if root is not None else None,
        state_home=runtime.home.as_posix(),
    )


def repo_open_sync(payload: RepoOpenInput) -> RepoStatusOutput:
    path = payload.path.strip()
    if not path:
        raise ValueError("Repository path must not be empty.")
    get_runtime().session.select(Path(path))
    return _status()


def repo_show_sync(payload: RepoShowInput) -> RepoStatusOutput:
    _ = payload
    return _status()


async def repo_open(payload: RepoOpenInput) -> RepoStatusOutput:
    return await asyncio.to_thread(repo_open_sync, payload)


async def repo_show(payload: RepoShowInput) -> RepoStatusOutput:
    return repo_show_sync(payload)


operation(
    OperationSpec(
        name="repo.open",
        handler=repo_open,
        input_type=RepoOpenInput,
        output_type=RepoStatusOutput,
        cli_group="repo",
        cli_name="open",
        mcp_name="repo-open",
        description="Select and persist the active Git repository.",
    )
)

operation(
    OperationSpec(
        name="repo.show",
        handler=repo_show,
        input_type=RepoShowInput,
        output_type=RepoStatusOutput,
        cli_group="repo",
        cli_name="show",
        mcp_name="repo-show",
        description="Show the active Git repository.",
    )
)
