"""
JWT helper utilities.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from leaderboard.config import get_settings


def create_access_token(application_key: str, expires_minutes: int | None = None) -> str:
    """
    Create a signed JWT access token for an application.

    Args:
        application_key: Key of the authenticated application, stored as ``sub``.
        expires_minutes: Optional override for expiration window in minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expires_minutes or settings.access_token_expire_minutes)
    claims = {
        "sub": application_key,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": expire,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(claims, settings.auth_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Args:
        token: Encoded JWT string.

    Returns:
        Decoded payload dict.

    Raises:
        ValueError: If token is invalid or signature/audience/expiry check fails.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.auth_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
