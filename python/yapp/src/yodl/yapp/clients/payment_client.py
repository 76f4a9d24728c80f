"""
PaymentClient - payment requests over the in-frame or redirect transport

In-frame: the request is posted to the host window and the first of
PAYMENT_SUCCESS / PAYMENT_CANCELLED / RECIPIENT_NOT_FOUND / timeout wins.

Redirect: the request is persisted in session storage, the page navigates
to the host payment page, and the host sends the browser back to the
caller's redirect URL with the outcome in the query string. The return
handler matches that outcome to the pending request by memo.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from yodl.yapp.config import ProtocolConfig, YappConfig
from yodl.yapp.environment import PageContext, VisibilityListener
from yodl.yapp.exceptions import (
    InvalidAmountError,
    InvalidCurrencyError,
    MemoTooLargeError,
    PaymentCancelledError,
    PaymentFailedError,
    PaymentSupersededError,
    PaymentTimedOutError,
    RecipientNotResolvedError,
    RedirectUrlRequiredError,
)
from yodl.yapp.messaging import CrossWindowChannel, InFrameExchange, TimeoutController
from yodl.yapp.storage import PendingRequestRecord, SessionRecoveryStore
from yodl.yapp.transport import TransportMode
from yodl.yapp.types import (
    PAYMENT_OUTCOME_KINDS,
    PAYMENT_REQUEST,
    Message,
    PaymentRequest,
    PaymentResult,
    RecipientNotFound,
)
from yodl.yapp.utils import (
    ReturnParams,
    allowed_currencies,
    build_payment_url,
    create_memo_from_identifier,
    generate_request_id,
    is_valid_fiat_currency,
    is_valid_memo_size,
    parse_return_params,
    strip_payment_params,
)

logger = logging.getLogger(__name__)


def validate_payment_fields(memo: Any = None, currency: Any = None, amount: Any = None) -> None:
    """
    Validate payment inputs before any side effect.

    Checks run in order: memo size, currency, amount. Values are checked as
    given, so booleans and numeric strings are not accepted as amounts.

    Raises:
        MemoTooLargeError: memo is over 32 UTF-8 bytes
        InvalidCurrencyError: currency is not a supported fiat code
        InvalidAmountError: amount is not a finite number above zero
    """
    if isinstance(memo, str) and not is_valid_memo_size(memo):
        raise MemoTooLargeError(memo, ProtocolConfig.MAX_MEMO_BYTES)

    if currency is not None and not is_valid_fiat_currency(currency):
        raise InvalidCurrencyError(currency, allowed_currencies())

    if amount is not None and not _is_positive_number(amount):
        raise InvalidAmountError(amount)


def validate_payment_request(request: PaymentRequest) -> None:
    validate_payment_fields(request.memo, request.currency, request.amount)


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value) and value > 0
    except OverflowError:
        # int beyond float range
        return False


def resolve_return(params: ReturnParams) -> PaymentResult:
    """
    Map the host's return parameters to an outcome.

    txHash together with chainId is sufficient for success, status is not
    consulted in that case.
    """
    if params.tx_hash and params.chain_id:
        try:
            chain_id = int(params.chain_id, 10)
        except ValueError:
            raise PaymentFailedError(f"Invalid chainId in return URL: {params.chain_id!r}")
        return PaymentResult(txHash=params.tx_hash, chainId=chain_id)

    if params.status == ProtocolConfig.STATUS_CANCELLED:
        raise PaymentCancelledError()

    raise PaymentFailedError()


def _payment_success(message: Message) -> PaymentResult:
    try:
        return PaymentResult.model_validate(message.payload)
    except PydanticValidationError as e:
        raise PaymentFailedError(f"Malformed payment confirmation: {e}") from e


def _payment_cancelled(message: Message) -> PaymentResult:
    raise PaymentCancelledError()


def _recipient_not_found(message: Message) -> PaymentResult:
    name = None
    if isinstance(message.payload, dict):
        try:
            name = RecipientNotFound.model_validate(message.payload).name
        except PydanticValidationError:
            logger.debug(f"Unreadable recipient payload: {message.payload!r}")
    raise RecipientNotResolvedError(name)


PAYMENT_OUTCOMES = dict(
    zip(PAYMENT_OUTCOME_KINDS, (_payment_success, _payment_cancelled, _recipient_not_found))
)


@dataclass
class RedirectWait:
    """A redirect payment waiting for the browser to come back"""

    memo: str
    timeout_id: Optional[str]
    future: asyncio.Future
    timer: Optional[TimeoutController] = None
    visibility_listener: Optional[VisibilityListener] = field(default=None, repr=False)


class PaymentClient:
    """
    Payment request protocol.

    Owns the live redirect wait of its guest, if any; at most one redirect
    payment is in flight per client.
    """

    def __init__(
        self,
        channel: CrossWindowChannel,
        page: PageContext,
        store: SessionRecoveryStore,
        config: YappConfig,
        transport_mode: TransportMode,
        id_factory: Callable[[], str] = generate_request_id,
    ) -> None:
        """
        Initialize PaymentClient.

        Args:
            channel: Channel to the host window (in-frame transport)
            page: Current document (redirect transport)
            store: Pending request slot (redirect transport)
            config: Origin and timeout settings
            transport_mode: Transport used for every request of this client
            id_factory: Source of opaque identifiers for memos and timers
        """
        self._channel = channel
        self._page = page
        self._store = store
        self._config = config
        self._transport_mode = transport_mode
        self._id_factory = id_factory
        self._redirect: RedirectWait | None = None

    @property
    def transport_mode(self) -> TransportMode:
        return self._transport_mode

    @property
    def pending_memo(self) -> str | None:
        """Memo of the redirect payment awaited in this document"""
        return self._redirect.memo if self._redirect is not None else None

    @property
    def timeout_ms(self) -> int:
        return self._config.request_timeout_ms

    async def request_payment(self, request: PaymentRequest) -> PaymentResult:
        """
        Request a payment from the host and wait for its outcome.

        Args:
            request: Recipient, amount, currency, memo and redirect URL

        Returns:
            Transaction hash and chain id of the confirmed payment

        Raises:
            ValidationError: Invalid memo, currency, amount or missing redirect URL
            TransportError: The host window is unreachable or the origin is rejected
            RequestOutcomeError: Cancelled, timed out, recipient not found or failed
        """
        validate_payment_request(request)

        if self._transport_mode == TransportMode.IN_FRAME:
            logger.info(f"Handling in-frame payment for {request.address_or_ens}")
            return await self._request_in_frame(request)

        if not request.redirect_url:
            raise RedirectUrlRequiredError()

        logger.info(f"Handling redirect payment for {request.address_or_ens}")
        return await self._request_via_redirect(request)

    async def resume_payment(self) -> PaymentResult | None:
        """
        Pick up the redirect payment persisted before a full page load.

        Returns:
            The payment result, or None when no payment is pending

        Raises:
            PaymentTimedOutError: The pending payment expired
            RequestOutcomeError: The host reported cancellation or failure
        """
        record = self._store.load()
        if record is None:
            return None

        live = self._redirect
        if live is not None and live.memo == record.memo:
            return await asyncio.shield(live.future)

        if self._store.is_expired(record, self.timeout_ms):
            logger.info(f"Pending payment {record.memo} expired")
            self._store.clear()
            raise PaymentTimedOutError()

        if live is not None:
            self._supersede(live)

        logger.info(f"Resuming redirect payment {record.memo}")
        future = self._install_return_handler(
            record.memo,
            record.timeout_id,
            self._store.remaining_ms(record, self.timeout_ms),
        )
        return await future

    async def _request_in_frame(self, request: PaymentRequest) -> PaymentResult:
        message = Message(
            kind=PAYMENT_REQUEST,
            payload=request.to_payload().model_dump(by_alias=True, exclude_none=True),
        )
        exchange: InFrameExchange[PaymentResult] = InFrameExchange(
            self._channel,
            PAYMENT_OUTCOMES,
            timeout_ms=self.timeout_ms,
            timeout_error=PaymentTimedOutError,
            name="payment",
        )
        return await exchange.run(message)

    async def _request_via_redirect(self, request: PaymentRequest) -> PaymentResult:
        memo = request.memo or create_memo_from_identifier(self._id_factory())

        if self._redirect is not None:
            self._supersede(self._redirect)
        elif self._store.load() is not None:
            logger.info("Replacing pending payment left by a previous page")

        timeout_id = self._id_factory()
        self._store.save(
            PendingRequestRecord(
                memo=memo,
                timestamp=self._store.now_ms(),
                redirectUrl=request.redirect_url,
                payload=request.to_payload().model_copy(update={"memo": memo}),
                timeoutId=timeout_id,
            )
        )

        # Installed before navigating: a same-document return never reloads
        future = self._install_return_handler(memo, timeout_id, self.timeout_ms)

        payment_url = build_payment_url(
            self._config.origin,
            request.address_or_ens,
            request.redirect_url,
            memo,
            request.amount,
            request.currency,
        )
        logger.info(f"Navigating to host payment page for memo {memo}")
        try:
            self._page.navigate(payment_url)
        except Exception:
            self._store.clear_if_memo(memo)
            if self._redirect is not None and self._redirect.memo == memo:
                self._release(self._redirect)
            future.cancel()
            raise

        return await future

    def _install_return_handler(
        self, memo: str, timeout_id: str | None, timeout_ms: int
    ) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        wait = RedirectWait(memo=memo, timeout_id=timeout_id, future=loop.create_future())

        def on_visibility() -> None:
            if self._page.is_visible():
                self._check_return(wait)

        wait.visibility_listener = on_visibility
        wait.timer = TimeoutController(timeout_ms, lambda: self._on_redirect_timeout(wait), loop)
        wait.future.add_done_callback(lambda _: self._release(wait))

        self._redirect = wait
        self._page.add_visibility_listener(on_visibility)
        wait.timer.start()

        # The page may already be the return URL
        self._check_return(wait)
        return wait.future

    def _check_return(self, wait: RedirectWait) -> None:
        if wait.future.done():
            return

        url = self._page.current_url()
        params = parse_return_params(url)
        if params.memo != wait.memo:
            if params.memo is not None:
                logger.debug(f"Ignoring return for memo {params.memo}, waiting for {wait.memo}")
            return

        self._page.replace_url(strip_payment_params(url))
        self._store.clear_if_memo(wait.memo)

        try:
            result = resolve_return(params)
        except PaymentFailedError as e:
            logger.info(f"Redirect payment {wait.memo} failed: {e}")
            self._finish(wait, error=e)
        except PaymentCancelledError as e:
            logger.info(f"Redirect payment {wait.memo} cancelled")
            self._finish(wait, error=e)
        else:
            logger.info(f"Redirect payment {wait.memo} confirmed: {result.tx_hash}")
            self._finish(wait, result=result)

    def _on_redirect_timeout(self, wait: RedirectWait) -> None:
        if wait.future.done():
            return
        self._store.clear_if_memo(wait.memo)
        self._finish(wait, error=PaymentTimedOutError())

    def _supersede(self, wait: RedirectWait) -> None:
        logger.info(f"Superseding pending redirect payment {wait.memo}")
        self._finish(wait, error=PaymentSupersededError(wait.memo))

    def _finish(
        self,
        wait: RedirectWait,
        result: PaymentResult | None = None,
        error: Exception | None = None,
    ) -> None:
        if wait.future.done():
            return
        self._release(wait)
        if error is not None:
            wait.future.set_exception(error)
        else:
            wait.future.set_result(result)

    def _release(self, wait: RedirectWait) -> None:
        if wait.timer is not None:
            wait.timer.cancel()
        if wait.visibility_listener is not None:
            self._page.remove_visibility_listener(wait.visibility_listener)
            wait.visibility_listener = None
        if self._redirect is wait:
            self._redirect = None
