"""
FastAPI dependency injection module.

Provides centralized dependencies for:
- Repositories
- Services
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from leaderboard.db import get_db
from leaderboard.repositories import (
    ApplicationRepository,
    BoardRepository,
    ContestantRepository,
)
from leaderboard.services import StandingsService, SubmissionService

# =============================================================================
# Repository Dependencies
# =============================================================================


def get_application_repository(db: Session = Depends(get_db)) -> ApplicationRepository:
    """Get ApplicationRepository instance."""
    return ApplicationRepository(db)


def get_board_repository(db: Session = Depends(get_db)) -> BoardRepository:
    """Get BoardRepository instance."""
    return BoardRepository(db)


def get_contestant_repository(db: Session = Depends(get_db)) -> ContestantRepository:
    """Get ContestantRepository instance."""
    return ContestantRepository(db)


# =============================================================================
# Service Dependencies
# =============================================================================


def get_submission_service(db: Session = Depends(get_db)) -> SubmissionService:
    """Get SubmissionService bound to the request session."""
    return SubmissionService(db)


def get_standings_service(db: Session = Depends(get_db)) -> StandingsService:
    """Get StandingsService bound to the request session."""
    return StandingsService(db)


__all__ = [
    # Repository dependencies
    "get_application_repository",
    "get_board_repository",
    "get_contestant_repository",
    # Service dependencies
    "get_submission_service",
    "get_standings_service",
]
