"""Contestant repository."""

from leaderboard.models import Contestant

from .base import BaseRepository


class ContestantRepository(BaseRepository[Contestant]):
    """Repository for Contestant operations."""

    model = Contestant
    kind = "contestant"
