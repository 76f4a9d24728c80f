"""
One-shot listener registry keyed by message kind
"""

import logging
from typing import Callable, Iterable

from yodl.yapp.types import Message

logger = logging.getLogger(__name__)

Listener = Callable[[Message], None]


class ListenerRegistry:
    """
    Maps a response kind to the callbacks waiting for it.

    Delivery is at-most-once: all callbacks of a kind are evicted before
    any of them runs, so a callback can never see two messages.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def register(self, kind: str, listener: Listener) -> Listener:
        """Append listener for kind and return it for later removal"""
        self._listeners.setdefault(kind, []).append(listener)
        return listener

    def remove(self, kind: str, listener: Listener) -> bool:
        """Remove one listener, returns False if it was not registered"""
        listeners = self._listeners.get(kind)
        if not listeners or listener not in listeners:
            return False
        listeners.remove(listener)
        if not listeners:
            del self._listeners[kind]
        return True

    def deliver(self, kind: str, message: Message) -> int:
        """
        Invoke and evict every listener registered for kind.

        Returns:
            Number of listeners invoked

        Raises:
            The first exception raised by a listener, after all of them ran
        """
        listeners = self._listeners.pop(kind, None)
        if not listeners:
            logger.debug(f"No listeners for {kind}")
            return 0

        first_error: Exception | None = None
        for listener in listeners:
            try:
                listener(message)
            except Exception as e:
                logger.error(f"Listener for {kind} failed: {e}", exc_info=True)
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error
        return len(listeners)

    def cancel_all(self, kinds: Iterable[str]) -> None:
        """Drop every listener of the given kinds without invoking them"""
        for kind in kinds:
            self._listeners.pop(kind, None)

    def has_listeners(self, kind: str) -> bool:
        return bool(self._listeners.get(kind))

    def kinds(self) -> list[str]:
        return list(self._listeners)

    def __len__(self) -> int:
        return sum(len(listeners) for listeners in self._listeners.values())
