"""FastAPI dependencies for database sessions, authentication, and roles."""

from typing import Optional
from datetime import datetime

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession
import jwt
from jwt import PyJWTError

from .config import settings
from .database import get_db
from .exceptions import AccountLockedError, AuthenticationError, AuthorizationError
from ..models.profile import Profile, UserRole
from ..services.profile_service import ProfileService


def _decode_bearer(authorization: str) -> dict:
    """Validate a Bearer header and return the identity claims."""
    try:
        scheme, token = authorization.split()
    except ValueError:
        raise AuthenticationError(detail="Invalid authorization header format")

    if scheme.lower() != "bearer":
        raise AuthenticationError(detail="Invalid authentication scheme")

    try:
        payload = jwt.decode(
            token,
            settings.bearer_token_secret,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
    except PyJWTError as e:
        raise AuthenticationError(detail=f"Token validation failed: {str(e)}")

    user_id = payload.get("sub")
    if user_id is None:
        raise AuthenticationError(detail="Invalid token payload")

    exp = payload.get("exp")
    if exp and datetime.utcnow().timestamp() > exp:
        raise AuthenticationError(detail="Token has expired")

    return {
        "user_id": str(user_id),
        "username": payload.get("username") or payload.get("preferred_username"),
        "email": payload.get("email"),
        "first_name": payload.get("first_name"),
        "last_name": payload.get("last_name"),
    }


async def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> dict:
    """
    Authentication dependency that validates Bearer tokens.

    Tokens are issued by the external identity service and signed with
    the shared secret.

    Args:
        authorization: Authorization header with Bearer token

    Returns:
        dict: User information from validated token

    Raises:
        AuthenticationError: If token is invalid or missing
    """
    if not authorization:
        raise AuthenticationError(detail="Authorization header missing")

    return _decode_bearer(authorization)


async def get_optional_user(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> Optional[dict]:
    """Like get_current_user, but anonymous callers get None."""
    if not authorization:
        return None

    return _decode_bearer(authorization)


async def get_current_profile(
    user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """
    Resolve the caller's profile, creating it on first sight.

    Raises:
        AccountLockedError: If the profile has been locked by an admin
    """
    profile = await ProfileService(db).ensure_profile(user)
    if profile.is_locked:
        raise AccountLockedError(user_id=profile.id)
    return profile


async def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    """Admin guard; returns the admin's profile."""
    if profile.role != UserRole.ADMIN:
        raise AuthorizationError(
            detail="Administrator role required",
            required_permissions=[UserRole.ADMIN.value],
        )
    return profile

