"""
Request clients
"""

from yodl.yapp.clients.base import InFrameClient
from yodl.yapp.clients.context_client import ContextClient
from yodl.yapp.clients.cookie_client import CookieClient
from yodl.yapp.clients.payment_client import (
    PaymentClient,
    RedirectWait,
    resolve_return,
    validate_payment_fields,
    validate_payment_request,
)
from yodl.yapp.clients.siwe_client import SiweClient

__all__ = [
    "ContextClient",
    "CookieClient",
    "InFrameClient",
    "PaymentClient",
    "RedirectWait",
    "SiweClient",
    "resolve_return",
    "validate_payment_fields",
    "validate_payment_request",
]
