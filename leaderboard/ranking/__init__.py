"""
Score ranking engine.

- ordering: how one field ranks its values
- comparator: lexicographic comparison of full result sets
- resolver: insert / replace / keep decision for a submission
- grouping: board- and contestant-grouped output views
"""

from .comparator import RankedEntry, compare_entries, ordered_fields, rank_entries
from .grouping import GroupedResult, group_by_board, group_by_contestant
from .ordering import Ordering, compare_values, is_better
from .resolver import (
    CandidateEntry,
    ConflictResolver,
    Resolution,
    ResolutionOutcome,
    validate_submission,
)

__all__ = [
    "Ordering",
    "is_better",
    "compare_values",
    "ordered_fields",
    "compare_entries",
    "RankedEntry",
    "rank_entries",
    "Resolution",
    "CandidateEntry",
    "ResolutionOutcome",
    "validate_submission",
    "ConflictResolver",
    "GroupedResult",
    "group_by_board",
    "group_by_contestant",
]
