"""
HS256 JWT verification.

Tokens are issued by the identity provider and signed with a shared secret.
The ``sub`` claim is the profile id; ``username`` is optional and only used
to seed a new profile.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from dotlife.config import get_settings


def create_access_token(
    profile_id: str,
    username: str | None = None,
    *,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """
    Create a signed access token.

    The API never issues tokens to end users; this exists for local
    development and the test suite.

    Args:
        profile_id: Value for the ``sub`` claim.
        username: Optional preferred username.
        expires_in: Token lifetime.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": profile_id,
        "iat": now,
        "exp": now + expires_in,
    }
    if username is not None:
        payload["username"] = username
    if settings.jwt_issuer is not None:
        payload["iss"] = settings.jwt_issuer
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or has no subject.
    """
    settings = get_settings()
    options: dict[str, Any] = {"require": ["sub", "exp"]}
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        msg = "Token subject is missing"
        raise jwt.InvalidTokenError(msg)
    return payload
