"""HS256 token verification."""

from datetime import timedelta

import jwt
import pytest

from dotlife.auth.jwt import create_access_token, verify_token
from dotlife.config import get_settings


class TestVerifyToken:
    def test_round_trip_claims(self):
        payload = verify_token(create_access_token("abc-123", "alice"))
        assert payload["sub"] == "abc-123"
        assert payload["username"] == "alice"

    def test_expired_token_rejected(self):
        token = create_access_token("abc-123", expires_in=timedelta(seconds=-10))
        with pytest.raises(jwt.InvalidTokenError, match="expired"):
            verify_token(token)

    def test_wrong_secret_rejected(self):
        settings = get_settings()
        token = jwt.encode({"sub": "abc", "exp": 9999999999}, "not-the-secret", algorithm=settings.jwt_algorithm)
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(token)

    def test_missing_subject_rejected(self):
        settings = get_settings()
        token = jwt.encode({"exp": 9999999999}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(token)
