"""Unit tests for password hashing and access tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from housing_dashboard.server.core.config import AuthConfig
from housing_dashboard.server.services.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

AUTH = AuthConfig(jwt_secret="unit-secret", jwt_expires_in="1h")


class TestPasswords:
    def test_hash_is_salted(self):
        first, second = hash_password("s3cret"), hash_password("s3cret")

        assert first != second
        assert first.startswith("$2")

    def test_verify(self):
        hashed = hash_password("s3cret")

        assert verify_password("s3cret", hashed)
        assert not verify_password("wrong", hashed)

    def test_malformed_hash_is_rejected(self):
        assert verify_password("s3cret", "not-a-bcrypt-hash") is False


class TestAccessTokens:
    def test_round_trip_claims(self):
        token = create_access_token("user-1", "a@example.com", "admin", AUTH)

        claims = decode_access_token(token, AUTH)

        assert claims["id"] == "user-1"
        assert claims["email"] == "a@example.com"
        assert claims["role"] == "admin"

    def test_expiry_follows_configured_lifetime(self):
        before = datetime.now(timezone.utc)
        claims = decode_access_token(create_access_token("u", "e@x.io", "user", AUTH), AUTH)

        expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        assert before + timedelta(minutes=59) < expires <= before + timedelta(hours=1, seconds=5)

    def test_wrong_secret(self):
        token = create_access_token("u", "e@x.io", "user", AUTH)

        with pytest.raises(InvalidTokenError):
            decode_access_token(token, AuthConfig(jwt_secret="other"))

    def test_expired(self):
        expired = jwt.encode(
            {"id": "u", "exp": datetime.now(timezone.utc) - timedelta(seconds=1)}, "unit-secret", algorithm="HS256"
        )

        with pytest.raises(InvalidTokenError):
            decode_access_token(expired, AUTH)

    def test_missing_user_id(self):
        token = jwt.encode({"email": "e@x.io"}, "unit-secret", algorithm="HS256")

        with pytest.raises(InvalidTokenError, match="no user id"):
            decode_access_token(token, AUTH)

    def test_garbage(self):
        with pytest.raises(InvalidTokenError):
            decode_access_token("not.a.token", AUTH)
