"""
Request dependencies for resolving the viewer.

    CurrentUser   - authenticated user, 401 otherwise
    OptionalUser  - authenticated user or None for anonymous requests
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from forumhub.core.database import get_db
from forumhub.core.exceptions import AuthenticationError
from forumhub.core.security import decode_access_token
from forumhub.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


async def _load_user(token: str, db: AsyncSession) -> User:
    payload = decode_access_token(token)

    subject = payload.get("sub")
    if not subject or not str(subject).isdigit():
        raise AuthenticationError("Invalid token payload")

    user = await db.get(User, int(subject))
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return user


async def get_current_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the authenticated user or fail with 401."""
    if not credentials:
        raise AuthenticationError("Authorization header required")
    return await _load_user(credentials.credentials, db)


async def get_optional_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Resolve the viewer when a valid token is present, else None."""
    if not credentials:
        return None
    try:
        return await _load_user(credentials.credentials, db)
    except AuthenticationError as e:
        logger.warning(f"Ignoring invalid credentials on public route: {e.message}")
        return None


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
