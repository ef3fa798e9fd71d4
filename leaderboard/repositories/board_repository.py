"""Board repository, including the board's field descriptors."""

from collections.abc import Iterable, Mapping
from typing import Any

from leaderboard.models import Board, Field

from .base import BaseRepository


class BoardRepository(BaseRepository[Board]):
    """Repository for Board operations."""

    model = Board
    kind = "board"

    def create_with_fields(self, name: str, fields: Iterable[Mapping[str, Any]]) -> Board:
        """
        Create a board together with its fields.

        Args:
            name: Board name.
            fields: Field descriptors with ``name``, ``sort_order`` and
                ``sort_descending`` keys.
        """
        board = Board(
            name=name,
            fields=[
                Field(
                    name=spec["name"],
                    sort_order=spec["sort_order"],
                    sort_descending=spec["sort_descending"],
                )
                for spec in fields
            ],
        )
        self.session.add(board)
        self.session.flush()
        return board
