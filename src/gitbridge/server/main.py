"""FastMCP server entry point and operation registration."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, cast

import structlog
from mcp.server.fastmcp import FastMCP

from gitbridge.lib.lifecycle import LifecycleSignal
from gitbridge.lib.logging import configure_logging
from gitbridge.lib.ops import get_all_operations
from gitbridge.lib.ops._runtime import get_runtime
from gitbridge.lib.ops.codec import coerce_input_payload, signature_from_dataclass
from gitbridge.lib.ops.registry import OperationSpec
from gitbridge.lib.serialization import to_jsonable

_REGISTERED_MCP_TOOLS: set[str] = set()
_REGISTERED_MCP_DESCRIPTIONS: dict[str, str] = {}

logger = structlog.get_logger(__name__)


def _log_focus_change(signal: LifecycleSignal) -> None:
    logger.info("Client focus changed.", signal=str(signal))


@asynccontextmanager
async def lifespan(_: FastMCP[Any]):
    """Initialize shared resources for MCP server lifetime.

    An attached client is the foreground shell: focus is gained when the
    session starts and lost when it ends.
    """

    configure_logging(json_mode=True)
    lifecycle = get_runtime().lifecycle
    unsubscribe = lifecycle.subscribe(_log_focus_change)
    lifecycle.focus_gained()
    try:
        yield {"ready": True}
    finally:
        lifecycle.focus_lost()
        unsubscribe()


mcp = FastMCP("gitbridge", lifespan=lifespan)


def _build_tool_handler(op: OperationSpec[Any, Any]) -> Any:
    """Adapt `op` to a FastMCP tool whose schema follows its input dataclass.

    Boundary operations already return JSON text, which becomes the tool's
    text content unchanged.
    """

    async def _tool(**kwargs: object) -> object:
        return to_jsonable(await op.handler(coerce_input_payload(op.input_type, kwargs)))

    _tool.__name__ = f"tool_{op.mcp_name.replace('-', '_')}"
    _tool.__doc__ = op.description
    cast("Any", _tool).__signature__ = signature_from_dataclass(op.input_type)
    return _tool


def _register_operation_tools() -> None:
    for op in get_all_operations():
        mcp.tool(name=op.mcp_name, description=op.description)(_build_tool_handler(op))
        _REGISTERED_MCP_TOOLS.add(op.mcp_name)
        _REGISTERED_MCP_DESCRIPTIONS[op.name] = op.description


def get_registered_mcp_tools() -> set[str]:
    """Expose MCP tool names for parity tests."""

    return set(_REGISTERED_MCP_TOOLS)


def get_registered_mcp_descriptions() -> dict[str, str]:
    """Expose MCP descriptions for parity tests."""

    return dict(_REGISTERED_MCP_DESCRIPTIONS)


def run_server() -> None:
    """Start the FastMCP stdio server."""

    mcp.run(transport="stdio")


_register_operation_tools()


if __name__ == "__main__":
    run_server()
