"""Process-wide runtime bundle shared by operation handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from gitbridge.lib.config._paths import resolve_state_home
from gitbridge.lib.config.settings import GitBridgeConfig, load_config
from gitbridge.lib.exec.retry import RetryPolicy
from gitbridge.lib.lifecycle import LifecycleChannel
from gitbridge.lib.session import RepositorySession
from gitbridge.lib.state.settings_store import SettingsStore


@dataclass(frozen=True, slots=True)
class BridgeRuntime:
    """Resolved dependencies used by boundary handlers."""

    home: Path
    config: GitBridgeConfig
    store: SettingsStore
    session: RepositorySession
    lifecycle: LifecycleChannel = field(default_factory=LifecycleChannel)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy.from_config(self.config)


def build_runtime(home: str | None = None) -> BridgeRuntime:
    """Load config and persisted settings from one state home."""

    resolved_home = Path(home).expanduser().resolve() if home else resolve_state_home()
    store = SettingsStore(resolved_home)
    return BridgeRuntime(
        home=resolved_home,
        config=load_config(resolved_home),
        store=store,
        session=RepositorySession.load(store),
    )


_RUNTIME: BridgeRuntime | None = None


def get_runtime() -> BridgeRuntime:
    """Return the process runtime, building it on first use."""

    global _RUNTIME
    if _RUNTIME is None:
        _RUNTIME = build_runtime()
    return _RUNTIME


def set_runtime(runtime: BridgeRuntime | None) -> None:
    """Replace the process runtime; None forces a rebuild on next use."""

    global _RUNTIME
    _RUNTIME = runtime
