"""
SiweClient - Sign-In with Ethereum through the host wallet
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from yodl.yapp.clients.base import InFrameClient
from yodl.yapp.exceptions import (
    MalformedResponseError,
    RequestTimedOutError,
    SignatureCancelledError,
)
from yodl.yapp.types import (
    PAYMENT_CANCELLED,
    SIWE_REQUEST,
    SIWE_RESPONSE,
    Message,
    SiweRequest,
    SiweResponse,
)

logger = logging.getLogger(__name__)


def _siwe_response(message: Message) -> SiweResponse:
    try:
        return SiweResponse.model_validate(message.payload)
    except PydanticValidationError as e:
        raise MalformedResponseError(f"Malformed signature response: {e}") from e


def _signature_cancelled(message: Message) -> SiweResponse:
    raise SignatureCancelledError("Signature request was cancelled")


class SiweClient(InFrameClient):
    feature = "SIWE signing"

    async def sign_siwe_message(self, request: SiweRequest) -> SiweResponse:
        """
        Have the host wallet sign a SIWE message.

        The host reports a declined signature with PAYMENT_CANCELLED.

        Raises:
            NotEmbeddedError: Not running in the host frame
            SignatureCancelledError: The user declined to sign
            RequestTimedOutError: No answer within the request timeout
            MalformedResponseError: The host answered with an unreadable signature
        """
        logger.info(f"Requesting SIWE signature for {request.domain}")
        return await self._exchange(
            SIWE_REQUEST,
            request.model_dump(by_alias=True, exclude_none=True),
            {
                SIWE_RESPONSE: _siwe_response,
                PAYMENT_CANCELLED: _signature_cancelled,
            },
            timeout_ms=self._config.request_timeout_ms,
            timeout_error=lambda: RequestTimedOutError("Signature request timed out"),
        )
