"""
Field ordering model.

A single convention is used everywhere a comparison result is produced:
``Ordering`` values are ordered so that a higher value means the first
operand is the better one.
"""

import math
from enum import IntEnum
from typing import TYPE_CHECKING

from leaderboard.exceptions import InvalidComparisonError

if TYPE_CHECKING:
    from leaderboard.models import Field


class Ordering(IntEnum):
    """Outcome of comparing a candidate against a reference."""

    WORSE = -1
    EQUAL = 0
    BETTER = 1


def require_value(field: "Field", value: float | None, role: str) -> float:
    """Return ``value`` or raise when it cannot take part in a ranking decision."""
    if value is None:
        raise InvalidComparisonError(f"{role} value for field {field.name!r} is missing")
    if isinstance(value, float) and math.isnan(value):
        raise InvalidComparisonError(f"{role} value for field {field.name!r} is NaN")
    return value


def is_better(field: "Field", candidate: float | None, reference: float | None) -> bool:
    """
    Check whether ``candidate`` ranks strictly better than ``reference`` on ``field``.

    Descending fields rank larger values better, ascending fields rank smaller
    values better. Equal values are never better.

    Raises:
        InvalidComparisonError: If either value is missing.
    """
    candidate = require_value(field, candidate, "candidate")
    reference = require_value(field, reference, "reference")
    if field.sort_descending:
        return candidate > reference
    return candidate < reference


def compare_values(field: "Field", candidate: float | None, reference: float | None) -> Ordering:
    """Single-field comparison following the same convention as entry comparison."""
    if is_better(field, candidate, reference):
        return Ordering.BETTER
    if is_better(field, reference, candidate):
        return Ordering.WORSE
    return Ordering.EQUAL


__all__ = ["Ordering", "require_value", "is_better", "compare_values"]
