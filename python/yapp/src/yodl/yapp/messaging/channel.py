"""
CrossWindowChannel - origin-checked messaging with the host window
"""

import logging
from collections.abc import Mapping
from typing import Any

from yodl.yapp.environment import HostWindow
from yodl.yapp.exceptions import NotEmbeddedError, OriginRejectedError
from yodl.yapp.messaging.registry import Listener, ListenerRegistry
from yodl.yapp.types import Message
from yodl.yapp.utils.origin import is_origin_allowed

logger = logging.getLogger(__name__)


class CrossWindowChannel:
    """
    Sender/receiver over the host's structured messaging channel.

    A single receive hook is installed per channel. Inbound messages from
    any origin other than the allowed one never reach a listener.
    """

    def __init__(
        self,
        window: HostWindow,
        allowed_origin: str,
        registry: ListenerRegistry | None = None,
    ) -> None:
        """
        Initialize the channel.

        Args:
            window: Host window port
            allowed_origin: The only origin messages are exchanged with
            registry: Listener registry (a fresh one if None)
        """
        self._window = window
        self._allowed_origin = allowed_origin
        self._registry = registry if registry is not None else ListenerRegistry()
        window.add_message_listener(self._receive)

    @property
    def allowed_origin(self) -> str:
        return self._allowed_origin

    @property
    def registry(self) -> ListenerRegistry:
        return self._registry

    def send(self, message: Message, target_origin: str) -> None:
        """
        Dispatch message to the parent window.

        Raises:
            OriginRejectedError: target_origin is not the allowed origin
            NotEmbeddedError: No parent window is reachable
        """
        if not is_origin_allowed(target_origin, self._allowed_origin):
            raise OriginRejectedError(target_origin, self._allowed_origin)

        if not self._window.is_embedded():
            raise NotEmbeddedError()

        logger.debug(f"Sending {message.kind} to {target_origin}")
        self._window.post_to_parent(
            message.model_dump(by_alias=True, exclude_none=True), target_origin
        )

    def on_message(self, kind: str, listener: Listener) -> Listener:
        """Subscribe listener to the next message of kind"""
        return self._registry.register(kind, listener)

    def off(self, kind: str, listener: Listener) -> None:
        """Unsubscribe listener from kind"""
        self._registry.remove(kind, listener)

    def _receive(self, origin: str, data: Any) -> None:
        if not is_origin_allowed(origin, self._allowed_origin):
            logger.debug(f"Dropping message from disallowed origin {origin!r}")
            return

        message = self._parse(data)
        if message is None:
            logger.debug("Dropping message without a kind")
            return

        delivered = self._registry.deliver(message.kind, message)
        logger.debug(f"Delivered {message.kind} to {delivered} listener(s)")

    @staticmethod
    def _parse(data: Any) -> Message | None:
        if isinstance(data, Message):
            return data
        if isinstance(data, Mapping) and isinstance(data.get("kind"), str):
            return Message(kind=data["kind"], payload=data.get("payload"))
        return None
