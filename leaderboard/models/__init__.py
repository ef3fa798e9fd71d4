"""
SQLAlchemy models for the leaderboard service.

Single source of truth for all database models.

Usage:
    from leaderboard.models import Board, Field, Contestant, Entry, Value
"""

from .application import Application
from .base import Base
from .board import Board, Field
from .contestant import Contestant
from .entry import Entry, Value

__all__ = [
    # Base
    "Base",
    # Applications
    "Application",
    # Boards
    "Board",
    "Field",
    # Contestants
    "Contestant",
    # Entries
    "Entry",
    "Value",
]
