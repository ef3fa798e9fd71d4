"""
Authentication router.

Applications exchange their key and secret (HTTP Basic) for a short-lived
bearer token used on every other endpoint.
"""

from fastapi import APIRouter, Depends

from leaderboard.config import get_settings
from leaderboard.logging import get_logger
from leaderboard.models import Application

from ..auth.dependencies import get_basic_application
from ..auth.jwt import create_access_token
from ..schemas import TokenResponse

logger = get_logger("auth")

router = APIRouter(tags=["auth"])


@router.post("/authenticate", response_model=TokenResponse)
def authenticate(application: Application = Depends(get_basic_application)):
    """Issue a bearer token for the application named in the Basic credentials."""
    settings = get_settings()
    token = create_access_token(application.key)
    logger.info("token_issued", key=application.key, admin=application.admin)
    return TokenResponse(
        access_token=token,
        expires_in=settings.access_token_expire_minutes * 60,
    )
