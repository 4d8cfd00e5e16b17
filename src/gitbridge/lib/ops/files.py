"""Filesystem boundary operations rooted at the active repository."""

from __future__ import annotations

from dataclasses import dataclass

from gitbridge.lib.ops._runtime import get_runtime
from gitbridge.lib.ops.dispatch import BoundaryOperation, dispatch
from gitbridge.lib.ops.registry import OperationSpec, operation


@dataclass(frozen=True, slots=True)
class FilePathInput:
    path: str = ""


@dataclass(frozen=True, slots=True)
class WriteFileInput:
    path: str = ""
    content: str = ""


async def file_exists(payload: FilePathInput) -> str:
    return await dispatch(get_runtime(), BoundaryOperation.EXISTS, payload.path)


async def file_read(payload: FilePathInput) -> str:
    return await dispatch(get_runtime(), BoundaryOperation.READ_FILE, payload.path)


async def file_write(payload: WriteFileInput) -> str:
    return await dispatch(
        get_runtime(),
        BoundaryOperation.WRITE_FILE,
        payload.path,
        payload.content,
    )


async def file_delete(payload: FilePathInput) -> str:
    return await dispatch(get_runtime(), BoundaryOperation.DELETE_FILE, payload.path)


operation(
    OperationSpec(
        name="fs.exists",
        handler=file_exists,
        input_type=FilePathInput,
        output_type=str,
        cli_group="fs",
        cli_name="exists",
        mcp_name=BoundaryOperation.EXISTS.value,
        description="Check whether a path exists in the active repository.",
    )
)

operation(
    OperationSpec(
        name="fs.read",
        handler=file_read,
        input_type=FilePathInput,
        output_type=str,
        cli_group="fs",
        cli_name="read",
        mcp_name=BoundaryOperation.READ_FILE.value,
        description="Read a UTF-8 text file from the active repository.",
    )
)

operation(
    OperationSpec(
        name="fs.write",
        handler=file_write,
        input_type=WriteFileInput,
        output_type=str,
        cli_group="fs",
        cli_name="write",
        mcp_name=BoundaryOperation.WRITE_FILE.value,
        description="Create or overwrite a text file in the active repository.",
    )
)

operation(
    OperationSpec(
        name="fs.delete",
        handler=file_delete,
        input_type=FilePathInput,
        output_type=str,
        cli_group="fs",
        cli_name="delete",
        mcp_name=BoundaryOperation.DELETE_FILE.value,
        description="Delete a file from the active repository.",
    )
)
