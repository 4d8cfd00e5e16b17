"""Operation registry shared by CLI and MCP surfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


@dataclass(frozen=True, slots=True)
class OperationSpec(Generic[InputT, OutputT]):
    """One operation, described once and exposed on both surfaces.

    Every operation gets both a CLI command and an MCP tool.

    `cli_group`/`cli_name` place it under `gitbridge <group> <name>`;
    `mcp_name` is the tool name, which for boundary operations equals the
    boundary operation identifier.
    """

    name: str
    handler: Callable[[InputT], Coroutine[Any, Any, OutputT]]
    input_type: type[InputT]
    output_type: type[OutputT]
    cli_group: str
    cli_name: str
    mcp_name: str
    description: str

    @property
    def cli_key(self) -> str:
        return f"{self.cli_group}.{self.cli_name}"


_OPERATIONS: dict[str, OperationSpec[Any, Any]] = {}
_loaded = False


def operation(spec: OperationSpec[InputT, OutputT]) -> OperationSpec[InputT, OutputT]:
    """Add `spec` to the registry; names are unique."""

    existing = _OPERATIONS.get(spec.name)
    if existing is not None:
        raise ValueError(
            f"Duplicate operation name '{spec.name}' (first registered by {existing.handler})"
        )
    _OPERATIONS[spec.name] = spec
    return spec


def _load_operation_modules() -> None:
    global _loaded
    if _loaded:
        return
    # Importing a module registers its operations.
    from gitbridge.lib.ops import files, git, repo

    _ = (files, git, repo)
    _loaded = True


def get_all_operations() -> list[OperationSpec[Any, Any]]:
    """Every registered operation, ordered by name."""

    _load_operation_modules()
    return sorted(_OPERATIONS.values(), key=lambda spec: spec.name)


def get_cli_operations(group: str) -> list[OperationSpec[Any, Any]]:
    """Operations that get a command under the `group` CLI app."""

    return [spec for spec in get_all_operations() if spec.cli_group == group]
