"""MCP integration checks via SDK stdio client."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest
from mcp.client.session import ClientSession
from mcp.client.stdio import StdioServerParameters, stdio_client


def _text_from_call_result(result: Any) -> str:
    for block in getattr(result, "content", []):
        text = getattr(block, "text", None)
        if isinstance(text, str):
            return text
    raise AssertionError("Call result did not include a text block")


@pytest.mark.asyncio
async def test_boundary_tools_registered_and_callable(
    package_root: Path,
    cli_env: dict[str, str],
    repo_root: Path,
    mock_git: Path,
) -> None:
    env = dict(cli_env)
    env["GITBRIDGE_REPO_ROOT"] = str(repo_root)
    env["GITBRIDGE_GIT_EXECUTABLE"] = str(mock_git)

    params = StdioServerParameters(
        command=sys.executable,
        args=["-m", "gitbridge", "serve"],
        env=env,
        cwd=package_root,
    )

    async with stdio_client(params) as (read_stream, write_stream), ClientSession(
        read_stream, write_stream
    ) as session:
        await session.initialize()

        listed = await session.list_tools()
        names = {tool.name for tool in listed.tools}
        assert {
            "call-git",
            "exists",
            "read-file",
            "write-file",
            "delete-file",
            "repo-open",
            "repo-show",
        }.issubset(names)

        written = await session.call_tool(
            "write-file",
            {"path": "hello.txt", "content": "hi there"},
        )
        assert written.isError is False
        assert json.loads(_text_from_call_result(written)) is None

        exists = await session.call_tool("exists", {"path": "hello.txt"})
        assert exists.isError is False
        assert json.loads(_text_from_call_result(exists)) is True

        read = await session.call_tool("read-file", {"path": "hello.txt"})
        assert json.loads(_text_from_call_result(read)) == "hi there"

        git = await session.call_tool("call-git", {"args": ["status", "--porcelain"]})
        assert git.isError is False
        assert json.loads(_text_from_call_result(git)) == "ran status --porcelain\n"

        missing = await session.call_tool("delete-file", {"path": "never.txt"})
        assert missing.isError is True
        assert "never.txt" in _text_from_call_result(missing)

    assert (repo_root / "hello.txt").read_text(encoding="utf-8") == "hi there"
