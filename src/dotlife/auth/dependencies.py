"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from dotlife.auth.jwt import verify_token
from dotlife.config import get_settings
from dotlife.database import get_session
from dotlife.db.models import Profile
from dotlife.errors import ForbiddenError, UnauthorizedError
from dotlife.profiles.service import get_or_create_profile

_bearer = HTTPBearer(auto_error=False)


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    db: AsyncSession = Depends(get_session),
) -> Profile:
    """
    Verify the bearer token and return the caller's profile.

    The profile is created on the first authenticated request.
    Raises 401 on a missing or invalid token.
    """
    if credentials is None:
        msg = "Not authenticated"
        raise UnauthorizedError(msg)
    try:
        payload = verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        raise UnauthorizedError(str(e)) from e

    profile, created = await get_or_create_profile(db, payload["sub"], payload.get("username"))
    if created:
        await db.commit()
    return profile


async def require_admin(
    profile: Profile = Depends(get_current_profile),
) -> Profile:
    """Same as get_current_profile but additionally requires an admin profile id."""
    if profile.profile_id not in get_settings().admin_profile_ids:
        msg = "Admin access required"
        raise ForbiddenError(msg)
    return profile
