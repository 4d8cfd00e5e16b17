"""Lock-contention retry policy around the git runner."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

import structlog

from gitbridge.lib.config.settings import GitBridgeConfig
from gitbridge.lib.exec.errors import ErrorCategory, ProcessFailure, classify_failure

_DEFAULT_CONFIG = GitBridgeConfig()
DEFAULT_MAX_RETRIES = _DEFAULT_CONFIG.max_retries
DEFAULT_INITIAL_DELAY_SECONDS = _DEFAULT_CONFIG.retry_initial_delay_seconds
DEFAULT_BACKOFF_MULTIPLIER = _DEFAULT_CONFIG.retry_backoff_multiplier

Runner = Callable[[Sequence[str]], Awaitable[str]]
Sleeper = Callable[[float], Awaitable[object]]

logger = structlog.get_logger(__name__)


class RetryPhase(StrEnum):
    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Exponential backoff settings for lock-contention retries."""

    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay_seconds: float = DEFAULT_INITIAL_DELAY_SECONDS
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER

    @classmethod
    def from_config(cls, config: GitBridgeConfig) -> RetryPolicy:
        return cls(
            max_retries=config.max_retries,
            initial_delay_seconds=config.retry_initial_delay_seconds,
            backoff_multiplier=config.retry_backoff_multiplier,
        )


@dataclass(slots=True)
class RetryState:
    """Per-invocation retry state machine.

    Transitions:
        attempting --success--------------------------> succeeded
        attempting --lock contention, budget left-----> waiting
        attempting --lock contention, budget spent----> exhausted
        attempting --any other failure----------------> failed
        waiting    --delay elapsed--------------------> attempting
    """

    policy: RetryPolicy = field(default_factory=RetryPolicy)
    phase: RetryPhase = RetryPhase.ATTEMPTING
    attempts: int = 0
    retries_remaining: int = field(init=False)
    delay_seconds: float = field(init=False)

    def __post_init__(self) -> None:
        self.retries_remaining = self.policy.max_retries
        self.delay_seconds = self.policy.initial_delay_seconds

    @property
    def finished(self) -> bool:
        return self.phase in {RetryPhase.SUCCEEDED, RetryPhase.FAILED, RetryPhase.EXHAUSTED}

    def _require(self, expected: RetryPhase) -> None:
        if self.phase != expected:
            raise RuntimeError(
                f"Invalid retry transition from '{self.phase}' (expected '{expected}')."
            )

    def record_success(self) -> None:
        self._require(RetryPhase.ATTEMPTING)
        self.attempts += 1
        self.phase = RetryPhase.SUCCEEDED

    def record_failure(self, failure: ProcessFailure) -> float | None:
        """Record one failed attempt; return the wait before the next one, if any."""

        self._require(RetryPhase.ATTEMPTING)
        self.attempts += 1
        if classify_failure(failure) != ErrorCategory.RETRYABLE:
            self.phase = RetryPhase.FAILED
            return None
        if self.retries_remaining <= 0:
            self.phase = RetryPhase.EXHAUSTED
            return None

        wait_seconds = self.delay_seconds
        self.retries_remaining -= 1
        self.delay_seconds *= self.policy.backoff_multiplier
        self.phase = RetryPhase.WAITING
        return wait_seconds

    def resume(self) -> None:
        self._require(RetryPhase.WAITING)
        self.phase = RetryPhase.ATTEMPTING


async def run_with_retry(
    args: Sequence[str],
    *,
    runner: Runner,
    policy: RetryPolicy | None = None,
    sleep: Sleeper = asyncio.sleep,
) -> str:
    """Run `args` through `runner`, retrying while git reports index lock contention."""

    state = RetryState(policy=policy or RetryPolicy())
    while True:
        try:
            output = await runner(args)
        except ProcessFailure as failure:
            wait_seconds = state.record_failure(failure)
            if wait_seconds is None:
                if state.phase == RetryPhase.EXHAUSTED:
                    logger.warning(
                        "Giving up after repeated index lock contention.",
                        args=list(args),
                        attempts=state.attempts,
                    )
                raise
            logger.warning(
                "Retrying after index lock contention.",
                args=list(args),
                attempt=state.attempts,
                retries_remaining=state.retries_remaining,
                delay_seconds=wait_seconds,
            )
            await sleep(wait_seconds)
            state.resume()
            continue

        state.record_success()
        return output
