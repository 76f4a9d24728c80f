"""
Yapp Utility Functions
"""

from yodl.yapp.utils.currency import allowed_currencies, is_valid_fiat_currency
from yodl.yapp.utils.memo import (
    MAX_MEMO_BYTES,
    create_memo_from_identifier,
    generate_request_id,
    is_valid_memo_size,
    memo_byte_length,
)
from yodl.yapp.utils.origin import is_origin_allowed, normalize_origin
from yodl.yapp.utils.urls import (
    ReturnParams,
    build_payment_url,
    format_amount,
    parse_return_params,
    strip_payment_params,
)

__all__ = [
    "allowed_currencies",
    "is_valid_fiat_currency",
    "MAX_MEMO_BYTES",
    "create_memo_from_identifier",
    "generate_request_id",
    "is_valid_memo_size",
    "memo_byte_length",
    # Origin guard
    "is_origin_allowed",
    "normalize_origin",
    # Redirect URLs
    "ReturnParams",
    "build_payment_url",
    "format_amount",
    "parse_return_params",
    "strip_payment_params",
]
