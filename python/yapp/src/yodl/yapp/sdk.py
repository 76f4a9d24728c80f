"""
YappSDK - guest-side entry point

Wires one channel, listener registry and recovery store per instance and
exposes the request operations of every client.
"""

import logging
import time
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from yodl.yapp.clients import (
    ContextClient,
    CookieClient,
    PaymentClient,
    SiweClient,
    validate_payment_fields,
)
from yodl.yapp.config import YappConfig
from yodl.yapp.environment import HostWindow, MemorySessionStorage, PageContext, SessionStorage
from yodl.yapp.exceptions import ConfigurationError, ValidationError
from yodl.yapp.messaging import CrossWindowChannel
from yodl.yapp.security import TokenVerifier, check_audience
from yodl.yapp.storage import SessionRecoveryStore
from yodl.yapp.transport import TransportMode, detect_transport_mode
from yodl.yapp.types import (
    Cookie,
    FiatCurrency,
    PaymentRequest,
    PaymentResult,
    SiweRequest,
    SiweResponse,
    TokenClaims,
    UserContext,
)
from yodl.yapp.utils import generate_request_id

logger = logging.getLogger(__name__)


class YappSDK:
    """
    Guest SDK for one yapp.

    Example:
        sdk = YappSDK(YappConfig(ens_name="myapp.yodl.eth"), window, page)
        result = await sdk.request_payment("vitalik.eth", amount=50, currency="USD")
    """

    def __init__(
        self,
        config: YappConfig | Mapping[str, Any],
        window: HostWindow,
        page: PageContext,
        storage: Optional[SessionStorage] = None,
        verifier: Optional[TokenVerifier] = None,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = generate_request_id,
    ) -> None:
        """
        Initialize the SDK.

        Args:
            config: Settings, or a mapping of them
            window: Cross-window messaging port
            page: Current document port (redirect transport)
            storage: Session storage port, in-memory when omitted
            verifier: Token signature verifier used by verify()
            clock: Returns the current time in seconds
            id_factory: Source of opaque identifiers

        Raises:
            ConfigurationError: ensName missing or settings invalid
        """
        if not isinstance(config, YappConfig):
            try:
                config = YappConfig(**config)
            except PydanticValidationError as e:
                raise ConfigurationError(f"Invalid yapp configuration: {e}") from e

        self._config = config
        self._window = window
        self._verifier = verifier
        self._transport_mode = config.transport_mode or detect_transport_mode(window)

        self._channel = CrossWindowChannel(window, config.origin)
        self._store = SessionRecoveryStore(
            storage if storage is not None else MemorySessionStorage(), clock=clock
        )

        self._payments = PaymentClient(
            self._channel, page, self._store, config, self._transport_mode, id_factory
        )
        self._context = ContextClient(self._channel, config, self._transport_mode)
        self._siwe = SiweClient(self._channel, config, self._transport_mode)
        self._cookies = CookieClient(self._channel, config, self._transport_mode, clock)

        logger.info(
            f"YappSDK initialized for {config.ens_name} "
            f"(origin={config.origin}, transport={self._transport_mode.value})"
        )

    @property
    def config(self) -> YappConfig:
        return self._config

    @property
    def transport_mode(self) -> TransportMode:
        return self._transport_mode

    @property
    def channel(self) -> CrossWindowChannel:
        return self._channel

    @property
    def payments(self) -> PaymentClient:
        return self._payments

    def is_in_iframe(self) -> bool:
        return self._window.is_embedded()

    async def request_payment(
        self,
        address_or_ens: str,
        amount: Optional[float] = None,
        currency: Optional[FiatCurrency | str] = None,
        memo: Optional[str] = None,
        redirect_url: Optional[str] = None,
    ) -> PaymentResult:
        """
        Request a payment to address_or_ens and wait for the outcome.

        Raises:
            ValidationError: Invalid input; nothing was sent or stored
            TransportError: The host could not be reached
            RequestOutcomeError: Cancelled, timed out, not resolved or failed
        """
        validate_payment_fields(memo, currency, amount)
        try:
            request = PaymentRequest(
                addressOrEns=address_or_ens,
                amount=amount,
                currency=currency,
                memo=memo,
                redirectUrl=redirect_url,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid payment request: {e}") from e
        return await self._payments.request_payment(request)

    async def resume_payment(self) -> PaymentResult | None:
        """Finish a redirect payment started before this page loaded."""
        return await self._payments.resume_payment()

    async def get_user_context(self) -> UserContext:
        return await self._context.get_user_context()

    async def sign_siwe_message(self, request: SiweRequest) -> SiweResponse:
        return await self._siwe.sign_siwe_message(request)

    async def save_cookies(self, cookies: list[Cookie]) -> list[Cookie]:
        return await self._cookies.save_cookies(cookies)

    async def get_cookies(self, keys: Optional[list[str]] = None) -> list[Cookie]:
        return await self._cookies.get_cookies(keys)

    def close(self, target_origin: str) -> None:
        self._context.close(target_origin)

    async def verify(self, token: str) -> TokenClaims:
        """
        Verify a host-issued token and check it was issued for this yapp.

        Raises:
            ConfigurationError: No verifier was configured
            AudienceMismatchError: Token audience is another yapp
        """
        if self._verifier is None:
            raise ConfigurationError("No token verifier configured")
        claims = await self._verifier.verify(token)
        return check_audience(claims, self._config.ens_name)
