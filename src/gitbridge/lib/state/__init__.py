"""Persisted gitbridge state."""

from gitbridge.lib.state.settings_store import REPO_PATH_KEY, SettingsStore

__all__ = ["REPO_PATH_KEY", "SettingsStore"]
