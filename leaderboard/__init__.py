"""
Leaderboard Core Library.

This package provides the core functionality for the leaderboard service,
including database management, models, repositories, the ranking engine,
and logging.

Usage:
    # Database
    from leaderboard.db import db, get_db
    from leaderboard.models import Board, Contestant, Entry
    from leaderboard.repositories import BoardRepository, EntryRepository

    # Ranking
    from leaderboard.ranking import ConflictResolver, compare_entries

    # Config
    from leaderboard.config import get_settings, Settings

    # Logging
    from leaderboard.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"

# Users should import directly from submodules:
#   from leaderboard.db import db
#   from leaderboard.config import get_settings
#   from leaderboard.logging import get_logger
