"""Shared formatting protocol for output dataclasses.

Lives in the lib layer so both domain types (lib/) and CLI code (cli/)
can depend on it without introducing lib -> cli imports.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextFormattable(Protocol):
    """Protocol for output dataclasses that provide a human-readable text format."""

    def format_text(self) -> str: ...
