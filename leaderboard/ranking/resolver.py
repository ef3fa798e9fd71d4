"""
Conflict resolution for score submissions.

Decides whether a submitted result set becomes the stored entry of a
(board, contestant) pair and performs the single write that decision
authorizes. The stored entry behaves like a max-register under the board's
lexicographic field order: it only ever moves to a better result.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from leaderboard.exceptions import IncompleteSubmissionError, NotFoundError
from leaderboard.logging import ranking_logger as logger

from .comparator import compare_entries, ordered_fields
from .ordering import Ordering

if TYPE_CHECKING:
    from leaderboard.models import Board, Contestant, Entry
    from leaderboard.repositories import EntryRepository


class Resolution(str, Enum):
    """What happened to the stored entry."""

    INSERTED = "inserted"
    REPLACED = "replaced"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class CandidateEntry:
    """A submitted result set that has not been persisted."""

    board_id: int
    contestant_id: int
    values: Mapping[int, float]
    context: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class ResolutionOutcome:
    """
    Result of resolving one submission.

    Attributes:
        resolution: Whether the entry was inserted, replaced or left unchanged
        entry: The stored entry after the decision
        previous_values: Stored values (by field id) before the decision,
            None when there was no entry
    """

    resolution: Resolution
    entry: "Entry"
    previous_values: Optional[dict[int, float]] = None

    @property
    def changed(self) -> bool:
        return self.resolution is not Resolution.UNCHANGED


def validate_submission(board: "Board", submitted_values: Mapping[str, float]) -> dict[int, float]:
    """
    Check a submission covers exactly the board's fields.

    Args:
        board: Board with its fields loaded.
        submitted_values: Values keyed by field name.

    Returns:
        The values keyed by field id.

    Raises:
        IncompleteSubmissionError: If a field of the board has no value.
        NotFoundError: If a submitted name is not a field of the board.
    """
    fields = ordered_fields(board.fields)

    for field in fields:
        if submitted_values.get(field.name) is None:
            raise IncompleteSubmissionError(field.name, board.id)

    for name in sorted(submitted_values):
        if board.field_by_name(name) is None:
            raise NotFoundError("field", name)

    return {field.id: float(submitted_values[field.name]) for field in fields}


class ConflictResolver:
    """
    Decides insert / replace / keep for a submission and commits it via the repository.

    The caller is responsible for holding exclusive access to the
    (board, contestant) pair between reading ``existing_entry`` and the end
    of the transaction; see ``SubmissionService``.

    Usage:
        resolver = ConflictResolver(EntryRepository(session))
        existing = repo.get_entry(board.id, contestant.id, for_update=True)
        outcome = resolver.resolve(board, contestant, {"score": 100}, existing)
    """

    def __init__(self, repository: "EntryRepository"):
        self.repository = repository

    def resolve(
        self,
        board: "Board",
        contestant: "Contestant",
        submitted_values: Mapping[str, float],
        existing_entry: Optional["Entry"],
        context: Optional[dict[str, Any]] = None,
    ) -> ResolutionOutcome:
        values = validate_submission(board, submitted_values)
        candidate = CandidateEntry(
            board_id=board.id,
            contestant_id=contestant.id,
            values=values,
            context=context,
        )

        if existing_entry is None:
            logger.debug("entry_inserted", board_id=board.id, contestant_id=contestant.id)
            entry = self.repository.insert_entry(candidate)
            return ResolutionOutcome(Resolution.INSERTED, entry)

        previous = existing_entry.value_map()
        ordering = compare_entries(board.fields, candidate.values, previous)
        logger.debug(
            "entry_compared",
            board_id=board.id,
            contestant_id=contestant.id,
            ordering=ordering.name.lower(),
        )

        if ordering is Ordering.BETTER:
            entry = self.repository.replace_entry_values(
                existing_entry.id, candidate.values, candidate.context
            )
            return ResolutionOutcome(Resolution.REPLACED, entry, previous)

        return ResolutionOutcome(Resolution.UNCHANGED, existing_entry, previous)


__all__ = [
    "Resolution",
    "CandidateEntry",
    "ResolutionOutcome",
    "validate_submission",
    "ConflictResolver",
]
