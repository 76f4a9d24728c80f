"""
URL helpers for the redirect transport
"""

import math
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from yodl.yapp.config import ProtocolConfig


@dataclass
class ReturnParams:
    """Payment outcome parameters appended by the host to the redirect URL"""

    memo: Optional[str] = None
    status: Optional[str] = None
    tx_hash: Optional[str] = None
    chain_id: Optional[str] = None


def format_amount(amount: float) -> str:
    """Render amount the way the host parses it: 100 -> "100", 1.5 -> "1.5"."""
    if math.isfinite(amount) and float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def build_payment_url(
    origin: str,
    address_or_ens: str,
    redirect_url: str,
    memo: str,
    amount: float | None = None,
    currency: str | None = None,
) -> str:
    """
    Compose the host payment page URL.

    Format: {origin}/{addressOrEns}?redirectUrl=..&memo=..&amount=..&currency=..
    Optional parameters are omitted when not set.
    """
    parts = urlsplit(origin)
    path = "/" + quote(address_or_ens, safe="")

    query: list[tuple[str, str]] = [
        (ProtocolConfig.PARAM_REDIRECT_URL, redirect_url),
        (ProtocolConfig.PARAM_MEMO, memo),
    ]
    if amount is not None:
        query.append((ProtocolConfig.PARAM_AMOUNT, format_amount(amount)))
    if currency is not None:
        query.append((ProtocolConfig.PARAM_CURRENCY, currency))

    return urlunsplit((parts.scheme, parts.netloc, path, urlencode(query), ""))


def parse_return_params(url: str) -> ReturnParams:
    """Read the payment outcome parameters from url, first value wins."""
    values: dict[str, str] = {}
    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        values.setdefault(key, value)

    return ReturnParams(
        memo=values.get(ProtocolConfig.PARAM_MEMO),
        status=values.get(ProtocolConfig.PARAM_STATUS),
        tx_hash=values.get(ProtocolConfig.PARAM_TX_HASH),
        chain_id=values.get(ProtocolConfig.PARAM_CHAIN_ID),
    )


def strip_payment_params(url: str) -> str:
    """Remove the payment outcome parameters from url, keeping everything else."""
    parts = urlsplit(url)
    kept = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in ProtocolConfig.RETURN_PARAMS
    ]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(kept), parts.fragment))
