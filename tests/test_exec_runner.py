"""Process runner capture and outcome classification tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from gitbridge.lib.exec.errors import SPAWN_FAILURE_EXIT_CODE, BoundaryArgumentError, ProcessFailure
from gitbridge.lib.exec.runner import run_git

_CHUNKED_STDOUT = (
    "import sys, time\n"
    "for part in ('alpha ', 'beta ', 'gamma'):\n"
    "    sys.stdout.write(part)\n"
    "    sys.stdout.flush()\n"
    "    time.sleep(0.02)\n"
)


async def _python(script: str, *, cwd: Path) -> str:
    return await run_git(["-c", script], cwd=cwd, executable=sys.executable)


@pytest.mark.asyncio
async def test_success_returns_chunks_in_arrival_order(tmp_path: Path) -> None:
    assert await _python(_CHUNKED_STDOUT, cwd=tmp_path) == "alpha beta gamma"


@pytest.mark.asyncio
async def test_success_includes_both_streams(tmp_path: Path) -> None:
    output = await _python(
        "import sys; sys.stdout.write('to-stdout\\n'); sys.stderr.write('to-stderr\\n')",
        cwd=tmp_path,
    )

    # Interleaving between the two streams is unspecified.
    assert sorted(output.splitlines()) == ["to-stderr", "to-stdout"]


@pytest.mark.asyncio
async def test_nonzero_exit_raises_with_captured_text(tmp_path: Path) -> None:
    with pytest.raises(ProcessFailure) as excinfo:
        await _python(
            "import sys; sys.stderr.write('fatal: not a git repository'); sys.exit(3)",
            cwd=tmp_path,
        )

    assert excinfo.value.exit_code == 3
    assert excinfo.value.message == "fatal: not a git repository"
    assert str(excinfo.value) == "fatal: not a git repository"


@pytest.mark.asyncio
async def test_nonzero_exit_without_output_has_empty_message(tmp_path: Path) -> None:
    with pytest.raises(ProcessFailure) as excinfo:
        await _python("raise SystemExit(1)", cwd=tmp_path)

    assert excinfo.value.message == ""


@pytest.mark.asyncio
async def test_runs_in_requested_working_directory(tmp_path: Path) -> None:
    output = await _python("import os; print(os.getcwd(), end='')", cwd=tmp_path)

    assert Path(output).resolve() == tmp_path.resolve()


@pytest.mark.asyncio
async def test_multibyte_character_split_across_writes(tmp_path: Path) -> None:
    output = await _python(
        "import sys, time\n"
        "sys.stdout.buffer.write(b'caf\\xc3'); sys.stdout.flush(); time.sleep(0.05)\n"
        "sys.stdout.buffer.write(b'\\xa9'); sys.stdout.flush()\n",
        cwd=tmp_path,
    )

    assert output == "café"


@pytest.mark.asyncio
async def test_missing_executable_is_process_failure(tmp_path: Path) -> None:
    with pytest.raises(ProcessFailure) as excinfo:
        await run_git(["status"], cwd=tmp_path, executable="gitbridge-missing-executable")

    assert excinfo.value.exit_code == SPAWN_FAILURE_EXIT_CODE
    assert "gitbridge-missing-executable" in excinfo.value.message


@pytest.mark.asyncio
async def test_missing_working_directory_is_named(tmp_path: Path) -> None:
    gone = tmp_path / "moved-away"

    with pytest.raises(ProcessFailure) as excinfo:
        await run_git(["-c", "pass"], cwd=gone, executable=sys.executable)

    assert excinfo.value.exit_code == SPAWN_FAILURE_EXIT_CODE
    assert excinfo.value.message.startswith(f"working directory {gone}:")


@pytest.mark.asyncio
async def test_empty_argument_vector_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(BoundaryArgumentError):
        await run_git([], cwd=tmp_path)


@pytest.mark.asyncio
async def test_arguments_are_passed_unmodified(tmp_path: Path, mock_git: Path) -> None:
    output = await run_git(
        ["commit", "-m", "two words", "--allow-empty"],
        cwd=tmp_path,
        executable=str(mock_git),
    )

    assert output == "ran commit -m two words --allow-empty\n"


@pytest.mark.asyncio
async def test_each_attempt_is_logged_with_duration(tmp_path: Path) -> None:
    with capture_logs() as logs:
        await _python("print('ok')", cwd=tmp_path)

    completed = [entry for entry in logs if entry["event"] == "Boundary call completed."]
    assert len(completed) == 1
    assert "-c" in completed[0]["call"]
    assert completed[0]["duration_ms"] >= 0


@pytest.mark.asyncio
async def test_failed_attempt_is_logged_before_raising(tmp_path: Path) -> None:
    with capture_logs() as logs, pytest.raises(ProcessFailure):
        await _python("import sys; sys.exit(2)", cwd=tmp_path)

    events = [entry["event"] for entry in logs]
    assert "Boundary call failed." in events
    assert "Boundary call completed." not in events
