"""Tests for board- and contestant-grouped projections."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from leaderboard.exceptions import NotFoundError
from leaderboard.models import Board, Contestant, Entry, Field, Value
from leaderboard.ranking import group_by_board, group_by_contestant

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def boards():
    return [Board(id=1, name="Sprint"), Board(id=2, name="Marathon")]


@pytest.fixture
def fields():
    return [
        Field(id=10, board_id=1, name="points", sort_order=0, sort_descending=True),
        Field(id=11, board_id=1, name="time", sort_order=1, sort_descending=False),
        Field(id=20, board_id=2, name="distance", sort_order=0, sort_descending=True),
    ]


@pytest.fixture
def people():
    return [Contestant(id=1, name="alice"), Contestant(id=2, name="bob"), Contestant(id=3, name="carol")]


def _entry(entry_id, board_id, contestant_id, values, minutes=0, context=None):
    return Entry(
        id=entry_id,
        board_id=board_id,
        contestant_id=contestant_id,
        context=context,
        created_at=T0 + timedelta(minutes=minutes),
        updated_at=T0 + timedelta(minutes=minutes),
        values=[Value(field_id=fid, value=v) for fid, v in values.items()],
    )


@pytest.fixture
def sprint_entries():
    return [
        _entry(1, 1, 1, {10: 100, 11: 30}, minutes=1, context={"heat": 1}),
        _entry(2, 1, 2, {10: 90, 11: 20}, minutes=2),
        _entry(3, 1, 3, {10: 95, 11: 25}, minutes=3),
    ]


class TestGroupByContestant:
    def test_one_record_per_contestant(self, sprint_entries, people, fields):
        results = group_by_contestant(sprint_entries, people, fields)

        assert [r.name for r in results] == ["alice", "bob", "carol"]
        assert results[0].key_id == 1
        assert results[0].values == {"points": 100, "time": 30}
        assert results[0].context == {"heat": 1}
        assert results[1].context is None
        assert results[2].created_at == T0 + timedelta(minutes=3)

    def test_round_trip_recovers_triples_in_any_order(self, sprint_entries, people, fields):
        names = {f.id: f.name for f in fields}
        expected = {
            (e.contestant_id, names[v.field_id], v.value) for e in sprint_entries for v in e.values
        }

        shuffled = list(sprint_entries)
        random.Random(7).shuffle(shuffled)
        results = group_by_contestant(shuffled, people, fields)

        flattened = {(r.key_id, name, value) for r in results for name, value in r.values.items()}
        assert flattened == expected

    def test_groups_follow_first_appearance(self, sprint_entries, people, fields):
        results = group_by_contestant(list(reversed(sprint_entries)), people, fields)
        assert [r.name for r in results] == ["carol", "bob", "alice"]

    def test_unknown_contestant_raises(self, sprint_entries, fields):
        with pytest.raises(NotFoundError) as exc_info:
            group_by_contestant(sprint_entries, [Contestant(id=1, name="alice")], fields)
        assert exc_info.value.kind == "contestant"

    def test_unknown_field_raises(self, sprint_entries, people):
        with pytest.raises(NotFoundError) as exc_info:
            group_by_contestant(sprint_entries, people, [])
        assert exc_info.value.kind == "field"

    def test_empty_input(self, people, fields):
        assert group_by_contestant([], people, fields) == []


class TestGroupByBoard:
    def test_one_record_per_board(self, people, boards, fields):
        entries = [
            _entry(1, 1, 1, {10: 100, 11: 30}, minutes=5),
            _entry(4, 2, 1, {20: 42.195}, minutes=1, context={"city": "Berlin"}),
        ]

        results = group_by_board(entries, boards, fields)

        assert [(r.key_id, r.name) for r in results] == [(1, "Sprint"), (2, "Marathon")]
        assert results[1].values == {"distance": 42.195}
        assert results[1].context == {"city": "Berlin"}

    def test_members_fold_by_entry_id_with_latest_metadata(self, boards, fields):
        older = _entry(5, 1, 1, {10: 1, 11: 1}, minutes=1, context={"n": "older"})
        newer = _entry(6, 1, 2, {10: 2}, minutes=9, context={"n": "newer"})

        for ordering in ([older, newer], [newer, older]):
            (result,) = group_by_board(ordering, boards, fields)
            # Later entry id wins a field-name collision
            assert result.values == {"points": 2, "time": 1}
            assert result.context == {"n": "newer"}
            assert result.created_at == T0 + timedelta(minutes=1)
            assert result.updated_at == T0 + timedelta(minutes=9)

    def test_unknown_board_raises(self, fields):
        entries = [_entry(1, 99, 1, {10: 1})]
        with pytest.raises(NotFoundError) as exc_info:
            group_by_board(entries, [], fields)
        assert exc_info.value.identifier == 99
