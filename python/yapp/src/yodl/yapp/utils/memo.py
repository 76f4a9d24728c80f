"""
Memo utilities

A memo is written on-chain next to the payment and doubles as the
correlation token of the redirect transport, so it must fit in 32 bytes.
"""

import uuid

from yodl.yapp.exceptions import MemoTooLargeError

MAX_MEMO_BYTES = 32


def memo_byte_length(memo: str) -> int:
    """UTF-8 encoded length of memo"""
    return len(memo.encode("utf-8", errors="surrogatepass"))


def is_valid_memo_size(memo: str, limit: int = MAX_MEMO_BYTES) -> bool:
    """Check that memo fits in limit bytes once UTF-8 encoded"""
    return memo_byte_length(memo) <= limit


def create_memo_from_identifier(identifier: str) -> str:
    """
    Derive a memo from an opaque identifier such as a UUID.

    Hyphens are removed, so a canonical UUID yields its 32 hex digits.

    Raises:
        MemoTooLargeError: The result does not fit, it is never truncated
    """
    memo = identifier.replace("-", "")
    if not is_valid_memo_size(memo):
        raise MemoTooLargeError(memo, MAX_MEMO_BYTES, "Memo is too long")
    return memo


def generate_request_id() -> str:
    """
    Generate a random request identifier.

    Returns:
        A UUID4 string, e.g. "123e4567-e89b-42d3-a456-426614174000"
    """
    return str(uuid.uuid4())
