"""Subscription support for state objects observed by the presentation layer."""

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[[object], None]


class Observable:
    """
    Minimal publish/subscribe mixin.

    Listeners are invoked synchronously, in subscription order, with the
    observed object after every mutation. A failing listener is logged
    and does not block the others.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Listener {listener!r} failed: {e}")
