"""Operations exposed on the CLI and MCP surfaces.

Registry access is lazy: operation modules import the registry themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gitbridge.lib.ops.registry import OperationSpec


def get_all_operations() -> list[OperationSpec[Any, Any]]:
    from gitbridge.lib.ops.registry import get_all_operations as _get_all_operations

    return _get_all_operations()


__all__ = ["get_all_operations"]
