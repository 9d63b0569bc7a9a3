"""Minimal subscribe / notify channel used by caches and collections"""

import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger("ksonnet.tooling.events")

T = TypeVar("T")

Listener = Callable[[T], None]


class EventEmitter(Generic[T]):
    """Minimal subscribe / notify channel, independent of any UI toolkit."""

    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, event: T) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Listener {listener!r} failed handling {event!r}")

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)
