"""Structlog configuration and boundary call observation."""

from __future__ import annotations

import logging as std_logging
import sys
import time
from collections.abc import Awaitable
from typing import TypeVar

import structlog

ResultT = TypeVar("ResultT")

logger = structlog.get_logger(__name__)


def _level_from_verbosity(verbosity: int) -> int:
    if verbosity <= 0:
        return std_logging.WARNING
    if verbosity == 1:
        return std_logging.INFO
    return std_logging.DEBUG


def configure_logging(json_mode: bool = False, verbosity: int = 0) -> None:
    """Configure structlog for CLI or MCP server mode."""

    level = _level_from_verbosity(verbosity)
    # stdout belongs to command output and the MCP stdio transport.
    handler = std_logging.StreamHandler(sys.stderr)
    handler.setFormatter(std_logging.Formatter("%(message)s"))
    std_logging.basicConfig(level=level, handlers=[handler])

    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


async def observe_call(description: str, pending: Awaitable[ResultT]) -> ResultT:
    """Await one boundary call, logging its duration or its failure.

    The result is returned and any exception re-raised unchanged.
    """

    started_at = time.perf_counter()
    try:
        result = await pending
    except Exception as exc:
        logger.warning("Boundary call failed.", call=description, error=str(exc))
        raise
    duration_ms = (time.perf_counter() - started_at) * 1000
    logger.info("Boundary call completed.", call=description, duration_ms=round(duration_ms, 1))
    return result
