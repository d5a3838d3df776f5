"""
JWT access tokens.

Tokens carry the user id in the ``sub`` claim.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from forumhub.core.config import settings
from forumhub.core.exceptions import AuthenticationError


def create_access_token(
    subject: int | str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """
    Create signed access token.

    Args:
        subject: User ID stored in the ``sub`` claim
        expires_delta: Lifetime (default from settings)
        extra_claims: Additional payload fields

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

    payload: dict[str, Any] = dict(extra_claims or {})
    payload.update(
        {
            "sub": str(subject),
            "iat": now,
            "exp": now + expires_delta,
        }
    )
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify token, raising AuthenticationError when invalid."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(f"Invalid token: {e}") from e
