"""
ContextClient - user context lookup and closing the guest
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from yodl.yapp.clients.base import InFrameClient
from yodl.yapp.exceptions import MalformedResponseError, RequestTimedOutError
from yodl.yapp.types import (
    CLOSE,
    USER_CONTEXT_REQUEST,
    USER_CONTEXT_RESPONSE,
    Message,
    UserContext,
)

logger = logging.getLogger(__name__)


def _user_context(message: Message) -> UserContext:
    try:
        return UserContext.model_validate(message.payload)
    except PydanticValidationError as e:
        raise MalformedResponseError(f"Malformed user context: {e}") from e


class ContextClient(InFrameClient):
    feature = "User context"

    async def get_user_context(self) -> UserContext:
        """
        Ask the host who is using the guest.

        Returns:
            The user's address, primary ENS name and community, if any

        Raises:
            NotEmbeddedError: Not running in the host frame
            RequestTimedOutError: No answer within the user context timeout
            MalformedResponseError: The host answered with an unreadable context
        """
        logger.info("Requesting user context")
        return await self._exchange(
            USER_CONTEXT_REQUEST,
            None,
            {USER_CONTEXT_RESPONSE: _user_context},
            timeout_ms=self._config.user_context_timeout_ms,
            timeout_error=lambda: RequestTimedOutError("User context request timed out"),
        )

    def close(self, target_origin: str) -> None:
        """Ask the host to close the guest; no reply is expected."""
        logger.info(f"Sending close message to {target_origin}")
        self._channel.send(Message(kind=CLOSE), target_origin)
