"""
Shared plumbing for in-frame request clients
"""

from typing import Any, Callable, Mapping

from yodl.yapp.config import YappConfig
from yodl.yapp.exceptions import NotEmbeddedError
from yodl.yapp.messaging import CrossWindowChannel, InFrameExchange, OutcomeHandler
from yodl.yapp.transport import TransportMode
from yodl.yapp.types import Message


class InFrameClient:
    """Base for clients whose requests only travel over the in-frame transport"""

    # Label used in the "only supported in iframe mode" error
    feature = "This request"

    def __init__(
        self,
        channel: CrossWindowChannel,
        config: YappConfig,
        transport_mode: TransportMode,
    ) -> None:
        self._channel = channel
        self._config = config
        self._transport_mode = transport_mode

    def _require_in_frame(self) -> None:
        if self._transport_mode != TransportMode.IN_FRAME:
            raise NotEmbeddedError(f"{self.feature} is only supported in iframe mode")

    async def _exchange(
        self,
        kind: str,
        payload: Any,
        outcomes: Mapping[str, OutcomeHandler],
        timeout_ms: int,
        timeout_error: Callable[[], Exception],
    ) -> Any:
        self._require_in_frame()
        exchange: InFrameExchange[Any] = InFrameExchange(
            self._channel,
            outcomes,
            timeout_ms=timeout_ms,
            timeout_error=timeout_error,
            name=kind.lower(),
        )
        return await exchange.run(Message(kind=kind, payload=payload))
