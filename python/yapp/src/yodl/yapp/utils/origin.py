"""
Origin comparison for cross-window messaging
"""

import logging
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
}


def normalize_origin(url: str) -> str | None:
    """
    Reduce an absolute URL to its origin.

    Args:
        url: Absolute URL or bare origin (e.g. "https://yodl.me/pay?x=1")

    Returns:
        "scheme://host:port" with default ports made explicit, or None if
        the value is not an absolute URL
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except (TypeError, ValueError, AttributeError):
        return None

    scheme = parts.scheme.lower()
    host = parts.hostname
    if not scheme or not host:
        return None

    if port is None:
        port = DEFAULT_PORTS.get(scheme)
    if ":" in host:
        host = f"[{host}]"
    return f"{scheme}://{host}:{port}" if port is not None else f"{scheme}://{host}"


def is_origin_allowed(candidate: str, reference: str) -> bool:
    """
    Check that candidate has the same scheme, host and port as reference.

    Malformed input on either side is a mismatch, never an exception.
    """
    candidate_origin = normalize_origin(candidate)
    if candidate_origin is None:
        logger.warning(f"Invalid origin format: {candidate!r}")
        return False

    reference_origin = normalize_origin(reference)
    if reference_origin is None:
        logger.warning(f"Invalid reference origin format: {reference!r}")
        return False

    return candidate_origin == reference_origin
