"""MCP server package for gitbridge."""

from gitbridge.server.main import (
    get_registered_mcp_descriptions,
    get_registered_mcp_tools,
    mcp,
    run_server,
)

__all__ = ["get_registered_mcp_descriptions", "get_registered_mcp_tools", "mcp", "run_server"]
