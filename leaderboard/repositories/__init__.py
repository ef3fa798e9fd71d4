"""
Repository pattern implementations for data access.

Repositories provide a clean abstraction over database operations.

Usage:
    from leaderboard.repositories import EntryRepository
    from leaderboard.db import db

    with db.session() as session:
        repo = EntryRepository(session)
        entries = repo.list_entries(board_id=1)
"""

from .application_repository import ApplicationRepository
from .base import BaseRepository
from .board_repository import BoardRepository
from .contestant_repository import ContestantRepository
from .entry_repository import EntryRepository

__all__ = [
    "BaseRepository",
    "ApplicationRepository",
    "BoardRepository",
    "ContestantRepository",
    "EntryRepository",
]
