"""
InFrameExchange - one correlated request/response over the channel
"""

import asyncio
import logging
from typing import Any, Callable, Generic, Mapping, TypeVar

from yodl.yapp.messaging.channel import CrossWindowChannel
from yodl.yapp.messaging.registry import Listener
from yodl.yapp.messaging.timeout import TimeoutController
from yodl.yapp.types import Message

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Turns a response message into the caller's result; raising settles with the error
OutcomeHandler = Callable[[Message], Any]


class InFrameExchange(Generic[T]):
    """
    Sends one request and waits for the first of several outcome kinds.

    Each outcome kind gets a one-shot listener. Whichever outcome or the
    timer comes first settles the future; every sibling listener and the
    timer are removed at that moment, later events are no-ops.
    """

    def __init__(
        self,
        channel: CrossWindowChannel,
        outcomes: Mapping[str, OutcomeHandler],
        timeout_ms: int,
        timeout_error: Callable[[], Exception],
        name: str = "request",
    ) -> None:
        """
        Initialize the exchange.

        Args:
            channel: Channel to send on and listen to
            outcomes: Response kind -> handler producing the result
            timeout_ms: How long to wait for any outcome
            timeout_error: Factory for the error raised on timeout
            name: Label used in logs
        """
        self._channel = channel
        self._outcomes = dict(outcomes)
        self._timeout_ms = timeout_ms
        self._timeout_error = timeout_error
        self._name = name
        self._listeners: dict[str, Listener] = {}
        self._timer: TimeoutController | None = None
        self._future: asyncio.Future | None = None

    @property
    def settled(self) -> bool:
        return self._future is not None and self._future.done()

    @property
    def timer(self) -> TimeoutController | None:
        return self._timer

    async def run(self, message: Message) -> T:
        """
        Send message and wait for its terminal outcome.

        Raises:
            TransportError: The message could not be sent; nothing is left registered
            Exception: Whatever the winning outcome handler or the timeout produced
        """
        if self._future is not None:
            raise RuntimeError(f"{self._name} exchange already started")

        loop = asyncio.get_running_loop()
        self._future = loop.create_future()
        self._future.add_done_callback(lambda _: self._teardown())

        for kind, handler in self._outcomes.items():
            listener = self._make_listener(kind, handler)
            self._listeners[kind] = listener
            self._channel.on_message(kind, listener)

        self._timer = TimeoutController(self._timeout_ms, self._on_timeout, loop).start()

        try:
            self._channel.send(message, self._channel.allowed_origin)
        except Exception:
            logger.warning(f"Failed to send {self._name}, releasing listeners")
            self._teardown()
            self._future.cancel()
            raise

        return await self._future

    def _make_listener(self, kind: str, handler: OutcomeHandler) -> Listener:
        def listener(message: Message) -> None:
            if self.settled:
                return
            logger.info(f"{self._name} settled by {kind}")
            try:
                result = handler(message)
            except Exception as e:
                self._settle(error=e)
            else:
                self._settle(result=result)

        return listener

    def _on_timeout(self) -> None:
        if self.settled:
            return
        self._settle(error=self._timeout_error())

    def _settle(self, result: Any = None, error: Exception | None = None) -> None:
        if self._future is None or self._future.done():
            return
        self._teardown()
        if error is not None:
            self._future.set_exception(error)
        else:
            self._future.set_result(result)

    def _teardown(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        for kind, listener in self._listeners.items():
            self._channel.off(kind, listener)
        self._listeners.clear()
