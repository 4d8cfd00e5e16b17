"""Cyclopts CLI entry point for gitbridge."""

from __future__ import annotations

import asyncio
import json
import sys
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated

import structlog
from cyclopts import App, Parameter

from gitbridge import __version__
from gitbridge.cli.fs_cmd import register_fs_commands
from gitbridge.cli.git_cmd import register_git_commands
from gitbridge.cli.output import OutputConfig, normalize_output_format
from gitbridge.cli.output import emit as emit_output
from gitbridge.cli.repo_cmd import register_repo_commands
from gitbridge.lib.exec.errors import BridgeError, ProcessFailure
from gitbridge.lib.logging import configure_logging
from gitbridge.lib.ops._runtime import get_runtime
from gitbridge.lib.ops.dispatch import handle_boundary_call
from gitbridge.server.main import run_server

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = structlog.get_logger(__name__)

_VERBOSE_FLAGS = frozenset({"-v", "--verbose"})


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Flags accepted before any command."""

    output: OutputConfig
    no_input: bool = False
    verbosity: int = 0


_GLOBAL_OPTIONS: ContextVar[GlobalOptions | None] = ContextVar("_GLOBAL_OPTIONS", default=None)


def get_global_options() -> GlobalOptions:
    return _GLOBAL_OPTIONS.get() or GlobalOptions(output=OutputConfig(format="text"))


def emit(payload: object) -> None:
    emit_output(payload, get_global_options().output)


def _input_allowed() -> bool:
    return not get_global_options().no_input


def _extract_global_options(argv: Sequence[str]) -> tuple[list[str], GlobalOptions]:
    """Strip global flags from `argv`; nothing after `--` is touched.

    Git arguments follow `--`, so flags such as `--format=%H` reach git intact.
    """

    args = list(argv)
    split = args.index("--") if "--" in args else len(args)
    head, tail = args[:split], args[split:]

    json_mode = porcelain_mode = no_input = False
    requested: str | None = None
    verbosity = 0
    cleaned: list[str] = []
    tokens = iter(head)
    for arg in tokens:
        if arg == "--json":
            json_mode = True
        elif arg == "--porcelain":
            porcelain_mode = True
        elif arg == "--no-input":
            no_input = True
        elif arg in _VERBOSE_FLAGS:
            verbosity += 1
        elif arg == "--format":
            requested = next(tokens, None)
            if requested is None:
                raise SystemExit("--format requires a value")
        elif arg.startswith("--format="):
            requested = arg.partition("=")[2]
        else:
            cleaned.append(arg)

    output_format = normalize_output_format(
        requested=requested,
        json_mode=json_mode,
        porcelain_mode=porcelain_mode,
    )
    options = GlobalOptions(
        output=OutputConfig(format=output_format),
        no_input=no_input,
        verbosity=verbosity,
    )
    return [*cleaned, *tail], options


app = App(
    name="gitbridge",
    help="Run git and repository file operations against one active repository.",
    version=__version__,
)


@app.default
def root(
    json_mode: Annotated[bool, Parameter(name="--json", help="Emit output as JSON.")] = False,
    output_format: Annotated[
        str | None,
        Parameter(name="--format", help="Output format: text, json, or porcelain."),
    ] = None,
    porcelain: Annotated[
        bool,
        Parameter(name="--porcelain", help="Emit tab-separated key=value output."),
    ] = False,
    no_input: Annotated[
        bool,
        Parameter(name="--no-input", help="Never prompt; fail when input is needed."),
    ] = False,
) -> None:
    """Show help. Global flags are documented here and consumed before parsing."""

    _ = (json_mode, output_format, porcelain, no_input)
    app.help_print()


@app.command(name="serve")
def serve() -> None:
    """Start FastMCP server on stdio."""

    run_server()


@app.command(name="call")
def call(name: str, *args: str) -> None:
    """Send one raw boundary call (call-git, exists, read-file, write-file, delete-file)."""

    emit(json.loads(asyncio.run(handle_boundary_call(get_runtime(), name, *args))))


git_app = App(name="git", help="Git commands in the active repository")
fs_app = App(name="fs", help="File commands in the active repository")
repo_app = App(name="repo", help="Active repository selection")

app.command(git_app, name="git")
app.command(fs_app, name="fs")
app.command(repo_app, name="repo")


_REGISTERED_CLI_COMMANDS: set[str] = set()
_REGISTERED_CLI_DESCRIPTIONS: dict[str, str] = {}


def _register_group_commands() -> None:
    for commands, descriptions in (
        register_git_commands(git_app, emit),
        register_fs_commands(fs_app, emit),
        register_repo_commands(repo_app, emit, _input_allowed),
    ):
        _REGISTERED_CLI_COMMANDS.update(commands)
        _REGISTERED_CLI_DESCRIPTIONS.update(descriptions)


def get_registered_cli_commands() -> set[str]:
    """Expose CLI operation command names for parity tests."""

    return set(_REGISTERED_CLI_COMMANDS)


def get_registered_cli_descriptions() -> dict[str, str]:
    """Expose CLI descriptions for parity tests."""

    return dict(_REGISTERED_CLI_DESCRIPTIONS)


def _fail(message: str, exit_code: int = 1) -> SystemExit:
    sys.stderr.write(message if message.endswith("\n") else f"{message}\n")
    return SystemExit(exit_code)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point used by `gitbridge` and `python -m gitbridge`."""

    cleaned_args, options = _extract_global_options(sys.argv[1:] if argv is None else argv)
    # Logs go to stderr; stdout carries command output only.
    configure_logging(json_mode=options.output.format == "json", verbosity=options.verbosity)

    token = _GLOBAL_OPTIONS.set(options)
    try:
        app(cleaned_args)
    except ProcessFailure as exc:
        # git's diagnostics are the message; its exit status is ours.
        raise _fail(exc.message, exc.exit_code if 0 < exc.exit_code < 256 else 1) from None
    except BridgeError as exc:
        logger.debug("Command failed.", error=exc.to_payload())
        raise _fail(f"error: {exc.message}") from None
    except (ValueError, OSError) as exc:
        raise _fail(f"error: {str(exc).strip() or type(exc).__name__}") from None
    finally:
        _GLOBAL_OPTIONS.reset(token)


_register_group_commands()
