"""
Read-side views of stored entries.

Loads the entities a projection needs in bulk and hands them to the
grouping functions, which never touch the database.
"""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from leaderboard.models import Board, Contestant
from leaderboard.ranking import (
    GroupedResult,
    group_by_board,
    group_by_contestant,
    rank_entries,
)
from leaderboard.repositories import BoardRepository, ContestantRepository, EntryRepository


@dataclass(frozen=True)
class Standing:
    """A contestant's grouped result on a board together with its rank."""

    rank: int
    result: GroupedResult


class StandingsService:
    """
    Builds board standings and per-contestant result views.

    Usage:
        service = StandingsService(session)
        standings = service.board_standings(board_id)
    """

    def __init__(self, session: Session):
        self.session = session
        self.boards = BoardRepository(session)
        self.contestants = ContestantRepository(session)
        self.entries = EntryRepository(session)

    def board_standings(self, board_id: int, board: Board | None = None) -> list[Standing]:
        """Entries of a board grouped by contestant, best first."""
        board = board or self.entries.get_board_with_fields(board_id)
        ranked = rank_entries(board.fields, self.entries.list_entries(board_id=board.id))
        contestants = self.contestants.get_many(r.entry.contestant_id for r in ranked)

        grouped = group_by_contestant([r.entry for r in ranked], contestants, board.fields)
        # One entry per contestant on a board, so groups line up with ranks
        return [Standing(rank=r.rank, result=g) for r, g in zip(ranked, grouped)]

    def contestant_results(
        self, contestant_id: int, contestant: Contestant | None = None
    ) -> list[GroupedResult]:
        """Entries of a contestant grouped by board, in board id order."""
        contestant = contestant or self.contestants.get_or_raise(contestant_id)
        entries = self.entries.list_entries(contestant_id=contestant.id)
        boards = self.boards.get_many(e.board_id for e in entries)
        entries.sort(key=lambda e: e.board_id)

        fields = [f for board in boards for f in board.fields]
        return group_by_board(entries, boards, fields)
