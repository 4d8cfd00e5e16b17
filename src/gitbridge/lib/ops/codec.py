"""Mapping between MCP tool arguments and operation input dataclasses."""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import MISSING, Field, fields, is_dataclass
from typing import Any, TypeVar, cast, get_origin, get_type_hints

PayloadT = TypeVar("PayloadT")


def _field_default(field: Field[Any]) -> object:
    if field.default is not MISSING:
        return field.default
    if field.default_factory is not MISSING:
        return field.default_factory()
    return inspect.Parameter.empty


def _coerce_field(annotation: Any, name: str, value: object) -> object:
    # Inputs carry strings and string sequences only.
    if get_origin(annotation) in (tuple, list):
        if isinstance(value, str) or not isinstance(value, (list, tuple)):
            raise TypeError(f"Field '{name}' must be a list of strings")
        items = tuple(str(item) for item in cast("list[object] | tuple[object, ...]", value))
        return items if get_origin(annotation) is tuple else list(items)
    if annotation is str:
        if value is None:
            raise TypeError(f"Field '{name}' must be a string")
        return str(value)
    return value


def coerce_input_payload(payload_type: type[PayloadT], raw_input: object) -> PayloadT:
    """Build `payload_type` from a tool's keyword arguments."""

    if raw_input is None:
        data: Mapping[str, object] = {}
    elif isinstance(raw_input, Mapping):
        data = cast("Mapping[str, object]", raw_input)
    else:
        raise TypeError(f"Tool input must be an object, got {type(raw_input).__name__}")

    if not is_dataclass(payload_type):
        return payload_type()

    hints = get_type_hints(payload_type)
    kwargs: dict[str, object] = {}
    for field in fields(payload_type):
        if field.name in data:
            kwargs[field.name] = _coerce_field(hints[field.name], field.name, data[field.name])
            continue
        default = _field_default(field)
        if default is inspect.Parameter.empty:
            raise TypeError(f"Missing required field '{field.name}'")
        kwargs[field.name] = default
    return cast("PayloadT", payload_type(**kwargs))


def signature_from_dataclass(payload_type: type[object]) -> inspect.Signature:
    """Keyword-only signature mirroring the dataclass fields.

    FastMCP derives the tool's input schema from this signature.
    """

    if not is_dataclass(payload_type):
        return inspect.Signature()

    hints = get_type_hints(payload_type)
    return inspect.Signature(
        [
            inspect.Parameter(
                field.name,
                inspect.Parameter.KEYWORD_ONLY,
                default=_field_default(field),
                annotation=hints[field.name],
            )
            for field in fields(payload_type)
        ]
    )
