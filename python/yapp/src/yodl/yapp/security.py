"""
Identity token verification

Signature checking is delegated to a TokenVerifier supplied by the
application; this module only enforces that the token was issued for
this yapp.
"""

import logging
from typing import Protocol

from yodl.yapp.exceptions import AudienceMismatchError
from yodl.yapp.types import TokenClaims

logger = logging.getLogger(__name__)


class TokenVerifier(Protocol):
    """Protocol for host token signature verification"""

    async def verify(self, token: str) -> TokenClaims:
        """Check the token signature and return its claims"""
        ...


def check_audience(claims: TokenClaims, ens_name: str) -> TokenClaims:
    """
    Ensure the token audience is this yapp.

    Raises:
        AudienceMismatchError: aud is missing or names another yapp
    """
    if claims.aud != ens_name:
        logger.warning(f"Rejecting token issued for {claims.aud!r}")
        raise AudienceMismatchError(claims.aud, ens_name)
    return claims
