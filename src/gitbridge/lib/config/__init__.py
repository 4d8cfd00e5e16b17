"""Configuration discovery and parsing helpers."""

from gitbridge.lib.config._paths import (
    is_git_repository,
    resolve_repo_root_override,
    resolve_state_home,
)
from gitbridge.lib.config.settings import GitBridgeConfig, load_config

__all__ = [
    "GitBridgeConfig",
    "is_git_repository",
    "load_config",
    "resolve_repo_root_override",
    "resolve_state_home",
]
