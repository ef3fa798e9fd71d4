"""
Lexicographic comparison of multi-field results.

Fields are checked by ascending ``sort_order``; the first field whose values
differ decides the outcome, later fields only break ties.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import cmp_to_key
from typing import TYPE_CHECKING

from leaderboard.exceptions import InvalidComparisonError

from .ordering import Ordering, compare_values, require_value

if TYPE_CHECKING:
    from leaderboard.models import Entry, Field


def ordered_fields(fields: Iterable["Field"]) -> list["Field"]:
    """Fields in comparison priority order (field id breaks equal sort orders)."""
    return sorted(fields, key=lambda f: (f.sort_order, f.id or 0))


def _value_of(values: Mapping[int, float], field: "Field", role: str) -> float:
    if field.id not in values:
        raise InvalidComparisonError(f"{role} has no value for field {field.name!r}")
    return require_value(field, values[field.id], role)


def compare_entries(
    fields: Iterable["Field"],
    candidate: Mapping[int, float],
    reference: Mapping[int, float] | None,
) -> Ordering:
    """
    Compare two result sets for the same board.

    Args:
        fields: The board's fields.
        candidate: Candidate values keyed by field id.
        reference: Stored values keyed by field id, or None when nothing is stored yet.

    Returns:
        ``Ordering.BETTER`` when the candidate ranks higher (always the case
        without a reference), ``Ordering.WORSE`` when it ranks lower, and
        ``Ordering.EQUAL`` when every field is tied.

    Raises:
        InvalidComparisonError: If a field value is missing on either side.
    """
    if reference is None:
        return Ordering.BETTER

    for field in ordered_fields(fields):
        ordering = compare_values(
            field,
            _value_of(candidate, field, "candidate"),
            _value_of(reference, field, "reference"),
        )
        if ordering is not Ordering.EQUAL:
            return ordering
    return Ordering.EQUAL


@dataclass(frozen=True)
class RankedEntry:
    """An entry and its competition rank (tied entries share a rank)."""

    rank: int
    entry: "Entry"


def rank_entries(fields: Iterable["Field"], entries: Iterable["Entry"]) -> list[RankedEntry]:
    """
    Sort a board's entries best-first.

    Tied entries share a rank and the next rank skips accordingly ("1224"
    ranking). Ties keep ascending entry id order.
    """
    fields = ordered_fields(fields)
    value_maps = {}

    def _values(entry: "Entry") -> dict[int, float]:
        if entry.id not in value_maps:
            value_maps[entry.id] = entry.value_map()
        return value_maps[entry.id]

    def _cmp(a: "Entry", b: "Entry") -> int:
        return -int(compare_entries(fields, _values(a), _values(b)))

    ordered = sorted(sorted(entries, key=lambda e: e.id), key=cmp_to_key(_cmp))

    ranked: list[RankedEntry] = []
    for position, entry in enumerate(ordered, start=1):
        if ranked and _cmp(ranked[-1].entry, entry) == 0:
            rank = ranked[-1].rank
        else:
            rank = position
        ranked.append(RankedEntry(rank=rank, entry=entry))
    return ranked


__all__ = ["ordered_fields", "compare_entries", "RankedEntry", "rank_entries"]
