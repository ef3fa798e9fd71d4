"""
Projection of stored entries into grouped output views.

Both views use the same two passes: index the related boards, contestants
and fields by id once, then fold the entries into one record per group.
Groups appear in the order their key is first seen in the input. Within a
group entries are folded in ascending entry id order, so a group's content
does not depend on input order.
"""

from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from leaderboard.exceptions import NotFoundError

if TYPE_CHECKING:
    from leaderboard.models import Board, Contestant, Entry, Field


@dataclass(frozen=True)
class GroupedResult:
    """One output record: a resolved group key and its values by field name."""

    key_id: Hashable
    name: str
    values: dict[str, float] = field(default_factory=dict)
    context: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def _latest(entries: list["Entry"]) -> "Entry":
    return max(
        entries,
        key=lambda e: (e.updated_at is not None, e.updated_at or datetime.min, e.id),
    )


def _group(
    entries: Iterable["Entry"],
    key_of: Callable[["Entry"], Hashable],
    names: Mapping[Hashable, str],
    kind: str,
    field_names: Mapping[int, str],
) -> list[GroupedResult]:
    groups: dict[Hashable, list["Entry"]] = {}
    for entry in entries:
        groups.setdefault(key_of(entry), []).append(entry)

    results = []
    for key, members in groups.items():
        if key not in names:
            raise NotFoundError(kind, key)

        members = sorted(members, key=lambda e: e.id)
        values: dict[str, float] = {}
        for entry in members:
            for value in sorted(entry.values, key=lambda v: v.field_id):
                if value.field_id not in field_names:
                    raise NotFoundError("field", value.field_id)
                values[field_names[value.field_id]] = value.value

        latest = _latest(members)
        results.append(
            GroupedResult(
                key_id=key,
                name=names[key],
                values=values,
                context=latest.context,
                created_at=min((e.created_at for e in members if e.created_at), default=None),
                updated_at=latest.updated_at,
            )
        )
    return results


def group_by_board(
    entries: Iterable["Entry"],
    boards: Iterable["Board"],
    fields: Iterable["Field"],
) -> list[GroupedResult]:
    """Group entries by board, resolving board and field names."""
    board_names = {board.id: board.name for board in boards}
    field_names = {f.id: f.name for f in fields}
    return _group(entries, lambda e: e.board_id, board_names, "board", field_names)


def group_by_contestant(
    entries: Iterable["Entry"],
    contestants: Iterable["Contestant"],
    fields: Iterable["Field"],
) -> list[GroupedResult]:
    """Group entries by contestant, resolving contestant and field names."""
    contestant_names = {contestant.id: contestant.name for contestant in contestants}
    field_names = {f.id: f.name for f in fields}
    return _group(entries, lambda e: e.contestant_id, contestant_names, "contestant", field_names)


__all__ = ["GroupedResult", "group_by_board", "group_by_contestant"]
