"""Core gitbridge library exports."""

from gitbridge.lib.lifecycle import LifecycleChannel, LifecycleSignal
from gitbridge.lib.session import RepositorySession, choose_repository

__all__ = ["LifecycleChannel", "LifecycleSignal", "RepositorySession", "choose_repository"]
