"""
Leaderboard services.

Services combine repositories and the ranking engine into the operations
exposed by the API.
"""

from .standings_service import Standing, StandingsService
from .submission_service import SubmissionService, submission_locks

__all__ = [
    "Standing",
    "StandingsService",
    "SubmissionService",
    "submission_locks",
]
