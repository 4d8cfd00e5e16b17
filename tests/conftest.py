"""Shared pytest fixtures for bridge and CLI integration checks."""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from gitbridge.lib.config.settings import GitBridgeConfig
from gitbridge.lib.ops._runtime import BridgeRuntime, set_runtime
from gitbridge.lib.session import RepositorySession
from gitbridge.lib.state.settings_store import SettingsStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

PACKAGE_ROOT = Path(__file__).resolve().parents[1]


@dataclass(frozen=True, slots=True)
class CliResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


@pytest.fixture
def package_root() -> Path:
    return PACKAGE_ROOT


@pytest.fixture(autouse=True)
def _isolated_environment(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Iterator[None]:
    for name in list(os.environ):
        if name.startswith("GITBRIDGE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GITBRIDGE_HOME", str(tmp_path / "home"))
    set_runtime(None)
    yield
    set_runtime(None)


@pytest.fixture
def state_home(tmp_path: Path) -> Path:
    return tmp_path / "home"


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Directory carrying a `.git` marker; no real git objects are created."""

    root = tmp_path / "repo"
    (root / ".git").mkdir(parents=True)
    return root.resolve()


@pytest.fixture
def mock_git(tmp_path: Path, package_root: Path) -> Path:
    """Executable wrapper that runs tests/mock_git.py with the test interpreter."""

    wrapper = tmp_path / "bin" / "git"
    wrapper.parent.mkdir(parents=True, exist_ok=True)
    wrapper.write_text(
        "#!/bin/sh\n"
        f"exec {shlex.quote(sys.executable)} "
        f"{shlex.quote(str(package_root / 'tests' / 'mock_git.py'))} \"$@\"\n",
        encoding="utf-8",
    )
    wrapper.chmod(0o755)
    return wrapper


@pytest.fixture
def make_runtime(state_home: Path) -> Callable[..., BridgeRuntime]:
    def _make(
        *,
        root: Path | None = None,
        git_executable: str = "git",
        max_retries: int = 3,
        retry_initial_delay_seconds: float = 0.001,
    ) -> BridgeRuntime:
        store = SettingsStore(state_home)
        runtime = BridgeRuntime(
            home=state_home,
            config=GitBridgeConfig(
                git_executable=git_executable,
                max_retries=max_retries,
                retry_initial_delay_seconds=retry_initial_delay_seconds,
            ),
            store=store,
            session=RepositorySession(store, root),
        )
        set_runtime(runtime)
        return runtime

    return _make


@pytest.fixture
def cli_env(package_root: Path, state_home: Path) -> dict[str, str]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("GITBRIDGE_")}
    existing = env.get("PYTHONPATH", "")
    root = str(package_root / "src")
    env["PYTHONPATH"] = root if not existing else f"{root}{os.pathsep}{existing}"
    env["GITBRIDGE_HOME"] = str(state_home)
    return env


@pytest.fixture
def run_gitbridge(package_root: Path, cli_env: dict[str, str]) -> Callable[..., CliResult]:
    def _run(
        args: list[str],
        timeout: float = 15.0,
        env: dict[str, str] | None = None,
        stdin: str | None = None,
    ) -> CliResult:
        completed = subprocess.run(
            [sys.executable, "-m", "gitbridge", *args],
            cwd=package_root,
            env={**cli_env, **(env or {})},
            input=stdin if stdin is not None else "",
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
        return CliResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    return _run
