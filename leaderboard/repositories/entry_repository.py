"""
Entry repository: the persistence interface used by the conflict resolver.

The resolver never touches the session directly. It reads the current
entry, then either inserts a new one or overwrites the stored values in
place through this repository. Concurrency failures are translated into
domain errors the submission service knows how to retry.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from leaderboard.exceptions import (
    ConflictError,
    DuplicateKeyError,
    InvalidComparisonError,
    NotFoundError,
)
from leaderboard.logging import get_logger
from leaderboard.models import Board, Entry, Value
from leaderboard.models.base import utcnow

from .base import BaseRepository

if TYPE_CHECKING:
    from leaderboard.ranking.resolver import CandidateEntry

logger = get_logger("repository.entry")


class EntryRepository(BaseRepository[Entry]):
    """Repository for Entry operations."""

    model = Entry
    kind = "entry"

    def get_board_with_fields(self, board_id: int) -> Board:
        """Get a board with its fields loaded, or raise NotFoundError."""
        board = self.session.scalar(
            select(Board).where(Board.id == board_id).options(selectinload(Board.fields))
        )
        if board is None:
            raise NotFoundError("board", board_id)
        return board

    def get_entry(self, board_id: int, contestant_id: int, for_update: bool = False) -> Entry | None:
        """
        Get the stored entry for a (board, contestant) pair.

        With ``for_update`` the row is locked until the transaction ends on
        databases that support row locks.
        """
        query = select(Entry).where(
            Entry.board_id == board_id,
            Entry.contestant_id == contestant_id,
        )
        if for_update:
            query = query.with_for_update()
        return self.session.scalar(query)

    def insert_entry(self, candidate: "CandidateEntry") -> Entry:
        """
        Persist a candidate as the entry of its (board, contestant) pair.

        Raises:
            DuplicateKeyError: If an entry already exists for the pair.
        """
        entry = Entry(
            board_id=candidate.board_id,
            contestant_id=candidate.contestant_id,
            context=candidate.context,
            values=[
                Value(field_id=field_id, value=value)
                for field_id, value in sorted(candidate.values.items())
            ],
        )
        self.session.add(entry)
        try:
            self.session.flush()
        except IntegrityError as exc:
            logger.warning(
                "entry_insert_conflict",
                board_id=candidate.board_id,
                contestant_id=candidate.contestant_id,
            )
            raise DuplicateKeyError(candidate.board_id, candidate.contestant_id) from exc
        return entry

    def replace_entry_values(
        self,
        entry_id: int,
        values: Mapping[int, float],
        context: Mapping[str, Any] | None,
    ) -> Entry:
        """
        Overwrite every value and the context of an entry in place.

        Raises:
            NotFoundError: If the entry no longer exists.
            InvalidComparisonError: If ``values`` does not match the stored field set.
            ConflictError: If the entry was modified concurrently.
        """
        entry = self.get_or_raise(entry_id)
        # A failed flush expires the instance, so its keys are read up front
        board_id, contestant_id = entry.board_id, entry.contestant_id

        stored = {value.field_id: value for value in entry.values}
        if set(stored) != set(values):
            raise InvalidComparisonError(
                f"replacement values for entry {entry_id} do not match its fields"
            )

        for field_id, value in values.items():
            stored[field_id].value = value
        entry.context = dict(context) if context is not None else None
        entry.updated_at = utcnow()

        try:
            self.session.flush()
        except StaleDataError as exc:
            logger.warning("entry_version_conflict", board_id=board_id, contestant_id=contestant_id)
            raise ConflictError(board_id, contestant_id) from exc
        return entry

    def list_entries(
        self,
        board_id: int | None = None,
        contestant_id: int | None = None,
    ) -> list[Entry]:
        """List stored entries, optionally restricted to a board and/or contestant."""
        query = select(Entry).order_by(Entry.id)
        if board_id is not None:
            query = query.where(Entry.board_id == board_id)
        if contestant_id is not None:
            query = query.where(Entry.contestant_id == contestant_id)
        return list(self.session.scalars(query))
