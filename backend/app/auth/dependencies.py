"""
Authentication dependencies for FastAPI routes.

Supports:
- HTTP Basic (application key and secret) to obtain a token
- Bearer token in Authorization header for every other endpoint
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBasic,
    HTTPBasicCredentials,
    HTTPBearer,
)
from sqlalchemy.orm import Session

from leaderboard.db import get_db
from leaderboard.logging import get_logger
from leaderboard.models import Application
from leaderboard.repositories import ApplicationRepository

from .jwt import decode_access_token

logger = get_logger("auth")

basic_scheme = HTTPBasic(auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str, scheme: str = "Bearer") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": scheme},
    )


def get_basic_application(
    credentials: HTTPBasicCredentials | None = Depends(basic_scheme),
    db: Session = Depends(get_db),
) -> Application:
    """Resolve the application from HTTP Basic credentials (key:secret)."""
    if credentials is None:
        raise _unauthorized("Not authenticated", scheme="Basic")

    application = ApplicationRepository(db).authenticate(credentials.username, credentials.password)
    if application is None:
        raise _unauthorized("Invalid application credentials", scheme="Basic")

    logger.info("basic_auth_succeeded", key=application.key)
    return application


def get_current_application(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Application:
    """
    Resolve the authenticated application from a bearer token.

    Steps:
    1) Decode the JWT, checking signature, audience and expiry.
    2) Load the application named by the ``sub`` claim or raise 401.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
    except ValueError:
        raise _unauthorized("Invalid authentication credentials") from None

    key = payload.get("sub")
    if not key:
        raise _unauthorized("Invalid authentication credentials")

    application = ApplicationRepository(db).get_by_id(key)
    if application is None:
        logger.info("token_auth_failed", reason="unknown_subject")
        raise _unauthorized("Application not found")
    return application


def require_admin(application: Application = Depends(get_current_application)) -> Application:
    """Only allow applications with administrator privileges."""
    if not application.admin:
        logger.info("token_auth_failed", reason="not_admin", key=application.key)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator privileges required",
        )
    return application
