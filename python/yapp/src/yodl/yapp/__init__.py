"""
yodl.yapp - guest SDK for host-mediated payments

Lets a guest application request payments, user context, SIWE signatures
and cookie storage from the Yodl host, either embedded in the host frame
or through a full-page redirect.
"""

__version__ = "0.1.0"

from yodl.yapp.config import ProtocolConfig, YappConfig
from yodl.yapp.environment import HostWindow, MemorySessionStorage, PageContext, SessionStorage
from yodl.yapp.exceptions import (
    AudienceMismatchError,
    ConfigurationError,
    InvalidAmountError,
    InvalidCurrencyError,
    MalformedResponseError,
    MemoTooLargeError,
    NotEmbeddedError,
    OriginRejectedError,
    PaymentCancelledError,
    PaymentFailedError,
    PaymentSupersededError,
    PaymentTimedOutError,
    RecipientNotResolvedError,
    RedirectUrlRequiredError,
    RequestCancelledError,
    RequestOutcomeError,
    RequestTimedOutError,
    SignatureCancelledError,
    TransportError,
    ValidationError,
    YappError,
)
from yodl.yapp.sdk import YappSDK
from yodl.yapp.security import TokenVerifier
from yodl.yapp.transport import TransportMode, detect_transport_mode
from yodl.yapp.types import (
    Cookie,
    CookieData,
    FiatCurrency,
    PaymentRequest,
    PaymentResult,
    SiweRequest,
    SiweResponse,
    TokenClaims,
    UserContext,
)

__all__ = [
    "__version__",
    # SDK
    "YappSDK",
    "YappConfig",
    "ProtocolConfig",
    "TransportMode",
    "detect_transport_mode",
    "TokenVerifier",
    # Environment
    "HostWindow",
    "PageContext",
    "SessionStorage",
    "MemorySessionStorage",
    # Types
    "FiatCurrency",
    "PaymentRequest",
    "PaymentResult",
    "UserContext",
    "SiweRequest",
    "SiweResponse",
    "Cookie",
    "CookieData",
    "TokenClaims",
    # Exceptions
    "YappError",
    "ValidationError",
    "MemoTooLargeError",
    "InvalidCurrencyError",
    "InvalidAmountError",
    "RedirectUrlRequiredError",
    "TransportError",
    "NotEmbeddedError",
    "OriginRejectedError",
    "RequestOutcomeError",
    "RequestCancelledError",
    "PaymentCancelledError",
    "SignatureCancelledError",
    "RequestTimedOutError",
    "PaymentTimedOutError",
    "PaymentFailedError",
    "PaymentSupersededError",
    "RecipientNotResolvedError",
    "MalformedResponseError",
    "ConfigurationError",
    "AudienceMismatchError",
]
