"""Rendering of command results for text, json, and porcelain modes."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, cast

from gitbridge.lib.formatting import TextFormattable
from gitbridge.lib.serialization import to_jsonable

OutputFormat = Literal["text", "json", "porcelain"]

_FORMATS: frozenset[str] = frozenset({"text", "json", "porcelain"})


@dataclass(frozen=True, slots=True)
class OutputConfig:
    format: OutputFormat


def normalize_output_format(
    *,
    requested: str | None,
    json_mode: bool,
    porcelain_mode: bool,
) -> OutputFormat:
    """`--json` beats `--porcelain`, which beats `--format`; text by default."""

    if json_mode:
        return "json"
    if porcelain_mode:
        return "porcelain"
    normalized = (requested or "text").strip().lower()
    if normalized not in _FORMATS:
        raise SystemExit("--format must be one of: text, json, porcelain")
    return cast("OutputFormat", normalized)


def _render_text(value: Any) -> str:
    if isinstance(value, str):
        # git output already ends with a newline.
        return value if value.endswith("\n") else f"{value}\n"
    if isinstance(value, TextFormattable):
        return f"{value.format_text()}\n"
    return json.dumps(to_jsonable(value), sort_keys=True, indent=2) + "\n"


def _render_porcelain(value: Any) -> str:
    payload = to_jsonable(value)
    if not isinstance(payload, dict):
        return _render_text(payload)
    fields: list[str] = []
    for key in sorted(cast("dict[str, object]", payload)):
        item = payload[key]
        rendered = json.dumps(item, sort_keys=True) if isinstance(item, (dict, list)) else str(item)
        fields.append(f"{key}={rendered}")
    return "\t".join(fields) + "\n"


def emit(value: Any, config: OutputConfig) -> None:
    """Write one result to stdout in the configured mode."""

    match config.format:
        case "json":
            rendered = json.dumps(to_jsonable(value), sort_keys=True) + "\n"
        case "porcelain":
            rendered = _render_porcelain(value)
        case _:
            rendered = _render_text(value)
    print(rendered, end="")
