"""Publish/subscribe channel for tree refresh notifications."""

from collections.abc import Callable

from loguru import logger

Subscriber = Callable[[], None]


class RefreshChannel:
    """Fan-out of "the favorites changed" to registered observers.

    The drop handlers publish once per committed operation; the tree view and
    decoration providers subscribe.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self) -> None:
        """Notify every subscriber. A failing subscriber does not stop the others."""
        for callback in list(self._subscribers):
            try:
                callback()
            except Exception:
                logger.exception("Refresh subscriber {!r} failed", callback)
