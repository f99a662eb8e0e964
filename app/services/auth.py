"""
Session Token Verification

Users sign in with the external identity provider, which issues signed
JSON Web Tokens. This service never creates tokens; it only checks the
signature and expiry of the ones the provider hands out and reads the
user id from the "sub" claim.
"""

import logging

from jose import jwt, JWTError
from app.config import settings

logger = logging.getLogger(__name__)


def verify_token(token: str) -> dict | None:
    """
    Verify and decode a session token.

    This checks:
    1. Signature is valid (signed with the provider's key)
    2. Token hasn't expired

    Args:
        token: JWT string to verify

    Returns:
        Decoded payload dictionary if valid, None if invalid/expired
    """
    if not settings.IDENTITY_JWT_KEY:
        logger.warning("IDENTITY_JWT_KEY is not configured. Rejecting session token.")
        return None
    try:
        return jwt.decode(
            token,
            settings.IDENTITY_JWT_KEY,
            algorithms=[settings.IDENTITY_JWT_ALGORITHM],
        )
    except JWTError as e:
        # Don't expose the specific error to the caller
        logger.warning(f"Rejected session token: {e}")
        return None
