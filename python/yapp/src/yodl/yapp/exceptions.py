"""
Yapp custom exception hierarchy
"""

from typing import Iterable


class YappError(Exception):
    """Yapp base exception"""

    pass


class ValidationError(YappError):
    """Request input rejected before any side effect"""

    pass


class MemoTooLargeError(ValidationError):
    """Memo does not fit in the on-chain memo field"""

    def __init__(self, memo: str, limit: int = 32, message: str | None = None):
        self.memo = memo
        self.limit = limit
        super().__init__(message or f"Memo exceeds maximum size of {limit} bytes")


class InvalidCurrencyError(ValidationError):
    """Currency code is not supported"""

    def __init__(self, received: object, allowed: Iterable[str]):
        self.received = received
        self.allowed = tuple(allowed)
        super().__init__(
            f'Invalid currency "{received}". Must be one of: {", ".join(self.allowed)}'
        )


class InvalidAmountError(ValidationError):
    """Amount is not a positive finite number"""

    def __init__(self, received: object):
        self.received = received
        super().__init__("Amount must be a positive number")


class RedirectUrlRequiredError(ValidationError):
    """Redirect transport selected without a redirect URL"""

    def __init__(self, message: str = "Redirect URL is required when running outside of an iframe"):
        super().__init__(message)


class TransportError(YappError):
    """Message could not be handed to the host"""

    pass


class NotEmbeddedError(TransportError):
    """No parent window is reachable"""

    def __init__(self, message: str = "Cannot send message: SDK is not running in an iframe"):
        super().__init__(message)


class OriginRejectedError(TransportError):
    """Target origin does not match the configured host origin"""

    def __init__(self, origin: str, expected: str):
        self.origin = origin
        self.expected = expected
        super().__init__(f'Invalid origin "{origin}". Expected "{expected}".')


class RequestOutcomeError(YappError):
    """Terminal, non-success outcome of a well-formed request"""

    pass


class RequestCancelledError(RequestOutcomeError):
    """The user cancelled the request in the host"""

    pass


class PaymentCancelledError(RequestCancelledError):
    """Payment was cancelled"""

    def __init__(self, message: str = "Payment was cancelled"):
        super().__init__(message)


class SignatureCancelledError(RequestCancelledError):
    """Signature request was cancelled"""

    def __init__(self, message: str = "Signature request was cancelled"):
        super().__init__(message)


class RequestTimedOutError(RequestOutcomeError):
    """No response arrived before the timeout"""

    pass


class PaymentTimedOutError(RequestTimedOutError):
    """Payment request timed out"""

    def __init__(self, message: str = "Payment request timed out"):
        super().__init__(message)


class PaymentFailedError(RequestOutcomeError):
    """Host reported neither success nor cancellation"""

    def __init__(self, message: str = "Payment failed"):
        super().__init__(message)


class PaymentSupersededError(PaymentFailedError):
    """A newer redirect payment replaced this one"""

    def __init__(self, memo: str):
        self.memo = memo
        super().__init__(f"Payment {memo} was superseded by a newer request")


class RecipientNotResolvedError(RequestOutcomeError):
    """Host could not resolve the recipient address or ENS name"""

    def __init__(self, name: str | None = None):
        self.name = name
        super().__init__(f"Recipient not found: {name}" if name else "Recipient not found")


class MalformedResponseError(RequestOutcomeError):
    """Host answered with a payload that does not match the expected shape"""

    pass


class ConfigurationError(YappError):
    """Configuration-related error"""

    pass


class AudienceMismatchError(YappError):
    """Token was issued for a different yapp"""

    def __init__(self, audience: object, expected: str):
        self.audience = audience
        self.expected = expected
        super().__init__(f"JWT issued for different yapp ({audience})")
