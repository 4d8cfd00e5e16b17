"""Bridge failure taxonomy and retry classification."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

# git prints "fatal: Unable to create '<repo>/.git/index.lock': File exists."
# when another git process holds the index. Matching on diagnostic text is
# locale and version dependent; callers needing a stable signal should not
# rely on it beyond the retry decision.
LOCK_CONTENTION_SIGNATURE = "index.lock': File exists"

SPAWN_FAILURE_EXIT_CODE = 127


class ErrorCategory(StrEnum):
    RETRYABLE = "retryable"
    UNRECOVERABLE = "unrecoverable"


class BridgeError(Exception):
    """Base class for failures surfaced across the bridge boundary."""

    code = "bridge_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_payload(self) -> dict[str, object]:
        return {"error": self.code, "message": self.message}


class ProcessFailure(BridgeError):
    """External tool exited nonzero; message is its captured output."""

    code = "process_failure"

    def __init__(self, exit_code: int, message: str) -> None:
        self.exit_code = exit_code
        super().__init__(message)

    @property
    def is_lock_contention(self) -> bool:
        return is_lock_contention(self.message)

    def to_payload(self) -> dict[str, object]:
        return {"error": self.code, "message": self.message, "exit_code": self.exit_code}


class IoFailure(BridgeError):
    """Filesystem operation under the active root could not complete."""

    code = "io_failure"

    def __init__(self, path: str | Path, cause: BaseException | str) -> None:
        self.path = str(path)
        self.cause = cause
        if isinstance(cause, OSError) and cause.strerror:
            detail = cause.strerror
        else:
            detail = str(cause)
        super().__init__(f"{self.path}: {detail}")

    def to_payload(self) -> dict[str, object]:
        return {"error": self.code, "message": self.message, "path": self.path}


class InvalidRepository(BridgeError):
    """Selected directory does not contain a `.git` directory."""

    code = "invalid_repository"

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Not a Git repository: {self.path}")


class NoActiveRepository(BridgeError):
    code = "no_active_repository"

    def __init__(self) -> None:
        super().__init__(
            "No repository selected. Run `gitbridge repo open PATH` or set GITBRIDGE_REPO_ROOT."
        )


class UnknownOperation(BridgeError):
    """Boundary call named an operation outside the fixed set."""

    code = "unknown_operation"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown boundary operation '{name}'")


class BoundaryArgumentError(BridgeError, ValueError):
    code = "invalid_arguments"


def is_lock_contention(message: str) -> bool:
    return LOCK_CONTENTION_SIGNATURE in message


def classify_failure(failure: BridgeError) -> ErrorCategory:
    """Classify one failed attempt into a retry category.

    Only git index lock contention is transient; everything else, including
    every filesystem failure, is surfaced to the caller unchanged.
    """

    if isinstance(failure, ProcessFailure) and failure.is_lock_contention:
        return ErrorCategory.RETRYABLE
    return ErrorCategory.UNRECOVERABLE
