"""Execution engine primitives."""

from gitbridge.lib.exec.errors import (
    BoundaryArgumentError,
    BridgeError,
    ErrorCategory,
    InvalidRepository,
    IoFailure,
    NoActiveRepository,
    ProcessFailure,
    UnknownOperation,
    classify_failure,
    is_lock_contention,
)
from gitbridge.lib.exec.retry import RetryPhase, RetryPolicy, RetryState, run_with_retry
from gitbridge.lib.exec.runner import DEFAULT_GIT_EXECUTABLE, run_git

__all__ = [
    "DEFAULT_GIT_EXECUTABLE",
    "BoundaryArgumentError",
    "BridgeError",
    "ErrorCategory",
    "InvalidRepository",
    "IoFailure",
    "NoActiveRepository",
    "ProcessFailure",
    "RetryPhase",
    "RetryPolicy",
    "RetryState",
    "UnknownOperation",
    "classify_failure",
    "is_lock_contention",
    "run_git",
    "run_with_retry",
]
