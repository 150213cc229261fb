"""
Password hashing and access tokens.

Passwords are hashed with bcrypt. Access tokens are JWTs signed with the
configured secret and carry the user's id, email and role.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from housing_dashboard.core.logging_config import get_logger
from housing_dashboard.server.core.config import AuthConfig, settings

logger = get_logger(__name__)


class InvalidTokenError(Exception):
    """Raised when an access token is malformed, forged or expired."""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plain-text password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def create_access_token(user_id: str, email: str, role: str, auth: Optional[AuthConfig] = None) -> str:
    """
    Issue a signed access token.

    Args:
        user_id: User primary key
        email: User email
        role: User role
        auth: Authentication configuration; defaults to the application settings

    Returns:
        Encoded JWT string
    """
    auth = auth or settings.auth
    claims = {
        "id": user_id,
        "email": email,
        "role": role,
        "exp": datetime.now(timezone.utc) + auth.token_lifetime,
    }
    return jwt.encode(claims, auth.jwt_secret, algorithm=auth.jwt_algorithm)


def decode_access_token(token: str, auth: Optional[AuthConfig] = None) -> Dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        InvalidTokenError: If the signature, expiry or claims are invalid
    """
    auth = auth or settings.auth
    try:
        claims = jwt.decode(token, auth.jwt_secret, algorithms=[auth.jwt_algorithm])
    except jwt.PyJWTError as e:
        raise InvalidTokenError(str(e)) from e
    if not claims.get("id"):
        raise InvalidTokenError("Token has no user id")
    return claims
