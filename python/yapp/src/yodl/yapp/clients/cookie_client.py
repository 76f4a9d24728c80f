"""
CookieClient - guest key/value storage kept by the host
"""

import logging
import time
from typing import Callable, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from yodl.yapp.clients.base import InFrameClient
from yodl.yapp.config import ProtocolConfig, YappConfig
from yodl.yapp.exceptions import MalformedResponseError, RequestTimedOutError
from yodl.yapp.messaging import CrossWindowChannel
from yodl.yapp.transport import TransportMode
from yodl.yapp.types import (
    GET_COOKIES_REQUEST,
    GET_COOKIES_RESPONSE,
    SAVE_COOKIES_REQUEST,
    SAVE_COOKIES_RESPONSE,
    Cookie,
    Message,
)

logger = logging.getLogger(__name__)

_cookie_list = TypeAdapter(list[Cookie])


def _cookies(message: Message) -> list[Cookie]:
    try:
        return _cookie_list.validate_python(message.payload or [])
    except PydanticValidationError as e:
        raise MalformedResponseError(f"Malformed cookie response: {e}") from e


class CookieClient(InFrameClient):
    feature = "Access to Yapp Cookiestore"

    def __init__(
        self,
        channel: CrossWindowChannel,
        config: YappConfig,
        transport_mode: TransportMode,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(channel, config, transport_mode)
        self._clock = clock

    async def save_cookies(self, cookies: list[Cookie]) -> list[Cookie]:
        """
        Store cookies with the host.

        Cookies without an expiry get one 7 days from now (epoch ms).

        Returns:
            The cookies as saved by the host
        """
        now_ms = int(self._clock() * 1000)
        with_expiry = [
            cookie.model_copy(
                update={
                    "data": cookie.data.model_copy(
                        update={"exp": cookie.data.exp or now_ms + ProtocolConfig.COOKIE_DEFAULT_EXPIRY_MS}
                    )
                }
            )
            for cookie in cookies
        ]
        logger.info(f"Saving {len(with_expiry)} cookies")
        return await self._exchange(
            SAVE_COOKIES_REQUEST,
            [cookie.model_dump(exclude_none=True) for cookie in with_expiry],
            {SAVE_COOKIES_RESPONSE: _cookies},
            timeout_ms=self._config.request_timeout_ms,
            timeout_error=lambda: RequestTimedOutError("Cookie persistence request timed out"),
        )

    async def get_cookies(self, keys: Optional[list[str]] = None) -> list[Cookie]:
        """Fetch cookies from the host, all of them when keys is None."""
        logger.info(f"Requesting cookies {keys if keys is not None else '(all)'}")
        return await self._exchange(
            GET_COOKIES_REQUEST,
            keys,
            {GET_COOKIES_RESPONSE: _cookies},
            timeout_ms=self._config.request_timeout_ms,
            timeout_error=lambda: RequestTimedOutError("Cookie retrieval request timed out"),
        )
