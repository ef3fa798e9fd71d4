"""
Backend services for the Leaderboard API.
"""

from . import board_service, contestant_service

__all__ = [
    "board_service",
    "contestant_service",
]
