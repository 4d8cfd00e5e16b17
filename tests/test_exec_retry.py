"""Lock-contention retry policy tests with an injected runner."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

import pytest

from gitbridge.lib.exec.errors import ProcessFailure
from gitbridge.lib.exec.retry import RetryPhase, RetryPolicy, RetryState, run_with_retry

LOCK_MESSAGE = "fatal: Unable to create '/work/repo/.git/index.lock': File exists."


def _lock_failure() -> ProcessFailure:
    return ProcessFailure(128, LOCK_MESSAGE)


class ScriptedRunner:
    """Runner that replays scripted outcomes and records every call."""

    def __init__(self, *outcomes: str | ProcessFailure) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[tuple[str, ...]] = []

    async def __call__(self, args: Sequence[str]) -> str:
        self.calls.append(tuple(args))
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, ProcessFailure):
            raise outcome
        return outcome


class RecordingSleep:
    def __init__(self) -> None:
        self.waits: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


@pytest.mark.asyncio
async def test_success_on_first_attempt_never_waits() -> None:
    runner = ScriptedRunner("clean\n")
    sleep = RecordingSleep()

    assert await run_with_retry(["status"], runner=runner, sleep=sleep) == "clean\n"
    assert runner.calls == [("status",)]
    assert sleep.waits == []


@pytest.mark.asyncio
async def test_lock_then_success_waits_once() -> None:
    runner = ScriptedRunner(_lock_failure(), "committed\n")
    sleep = RecordingSleep()

    result = await run_with_retry(["commit", "-m", "msg"], runner=runner, sleep=sleep)

    assert result == "committed\n"
    assert len(runner.calls) == 2
    assert sleep.waits == pytest.approx([0.1])


@pytest.mark.asyncio
async def test_exhaustion_raises_last_failure_after_three_retries() -> None:
    failures = [_lock_failure() for _ in range(4)]
    runner = ScriptedRunner(*failures)
    sleep = RecordingSleep()

    with pytest.raises(ProcessFailure) as excinfo:
        await run_with_retry(["add", "."], runner=runner, sleep=sleep)

    assert excinfo.value is failures[-1]
    assert len(runner.calls) == 4
    assert sleep.waits == pytest.approx([0.1, 0.2, 0.4])


@pytest.mark.asyncio
async def test_other_failures_propagate_immediately() -> None:
    failure = ProcessFailure(128, "fatal: not a git repository")
    runner = ScriptedRunner(failure, "unreachable")
    sleep = RecordingSleep()

    with pytest.raises(ProcessFailure) as excinfo:
        await run_with_retry(["status"], runner=runner, sleep=sleep)

    assert excinfo.value is failure
    assert len(runner.calls) == 1
    assert sleep.waits == []


@pytest.mark.asyncio
async def test_non_process_errors_are_not_retried() -> None:
    calls = 0

    async def _runner(args: Sequence[str]) -> str:
        nonlocal calls
        calls += 1
        raise OSError("disk on fire")

    with pytest.raises(OSError, match="disk on fire"):
        await run_with_retry(["status"], runner=_runner, sleep=RecordingSleep())
    assert calls == 1


@pytest.mark.asyncio
async def test_custom_policy_controls_budget_and_schedule() -> None:
    runner = ScriptedRunner(_lock_failure(), _lock_failure(), _lock_failure())
    sleep = RecordingSleep()
    policy = RetryPolicy(max_retries=2, initial_delay_seconds=0.5, backoff_multiplier=3.0)

    with pytest.raises(ProcessFailure):
        await run_with_retry(["pull"], runner=runner, policy=policy, sleep=sleep)

    assert sleep.waits == pytest.approx([0.5, 1.5])


@pytest.mark.asyncio
async def test_default_sleep_follows_backoff_schedule() -> None:
    runner = ScriptedRunner(*(_lock_failure() for _ in range(4)))

    started = time.monotonic()
    with pytest.raises(ProcessFailure):
        await run_with_retry(["status"], runner=runner)
    elapsed = time.monotonic() - started

    # 100 + 200 + 400 ms of backoff.
    assert elapsed >= 0.65
    assert elapsed < 5.0


@pytest.mark.asyncio
async def test_backoff_does_not_block_other_calls() -> None:
    order: list[str] = []
    runner = ScriptedRunner(_lock_failure(), "done")

    async def _retrying() -> None:
        await run_with_retry(["status"], runner=runner)
        order.append("retried")

    async def _independent() -> None:
        await asyncio.sleep(0)
        order.append("independent")

    await asyncio.gather(_retrying(), _independent())

    assert order == ["independent", "retried"]


def test_state_machine_transitions() -> None:
    state = RetryState(policy=RetryPolicy(max_retries=1, initial_delay_seconds=0.1))
    assert state.phase == RetryPhase.ATTEMPTING
    assert state.retries_remaining == 1

    assert state.record_failure(_lock_failure()) == pytest.approx(0.1)
    assert state.phase == RetryPhase.WAITING
    assert state.retries_remaining == 0
    assert state.delay_seconds == pytest.approx(0.2)

    state.resume()
    assert state.phase == RetryPhase.ATTEMPTING
    assert state.record_failure(_lock_failure()) is None
    assert state.phase == RetryPhase.EXHAUSTED
    assert state.finished
    assert state.attempts == 2


def test_state_machine_marks_non_retryable_failure() -> None:
    state = RetryState()

    assert state.record_failure(ProcessFailure(1, "error: pathspec 'x' did not match")) is None
    assert state.phase == RetryPhase.FAILED
    assert state.retries_remaining == 3


def test_state_machine_rejects_invalid_transitions() -> None:
    state = RetryState()
    state.record_success()

    assert state.phase == RetryPhase.SUCCEEDED
    with pytest.raises(RuntimeError, match="Invalid retry transition"):
        state.record_failure(_lock_failure())
    with pytest.raises(RuntimeError, match="Invalid retry transition"):
        state.resume()
