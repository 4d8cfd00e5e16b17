"""Window focus notifications forwarded to the presentation layer."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

import structlog

logger = structlog.get_logger(__name__)

Subscriber = Callable[["LifecycleSignal"], None]


class LifecycleSignal(StrEnum):
    FOCUS_GAINED = "focus-gained"
    FOCUS_LOST = "focus-lost"


class LifecycleChannel:
    """Payload-free focus notifications fanned out to subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register `subscriber`; the returned callable unsubscribes it."""

        self._subscribers.append(subscriber)

        def _unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return _unsubscribe

    def emit(self, signal: LifecycleSignal) -> None:
        logger.debug("Lifecycle signal.", signal=str(signal), subscribers=len(self._subscribers))
        for subscriber in tuple(self._subscribers):
            subscriber(signal)

    def focus_gained(self) -> None:
        self.emit(LifecycleSignal.FOCUS_GAINED)

    def focus_lost(self) -> None:
        self.emit(LifecycleSignal.FOCUS_LOST)
