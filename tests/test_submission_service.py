"""Tests for the submission service: retries, race handling and concurrency."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from leaderboard.db import db
from leaderboard.exceptions import (
    ConflictError,
    DuplicateKeyError,
    IncompleteSubmissionError,
    NotFoundError,
)
from leaderboard.locks import KeyedLock
from leaderboard.models import Entry
from leaderboard.ranking import Resolution
from leaderboard.repositories import EntryRepository
from leaderboard.services import SubmissionService


def _service(session, **kwargs):
    kwargs.setdefault("locks", KeyedLock())
    kwargs.setdefault("retry_backoff", 0)
    return SubmissionService(session, **kwargs)


def test_submit_inserts_then_replaces(test_session, race_board, contestants):
    service = _service(test_session)
    alice = contestants[0]

    first = service.submit(race_board.id, alice.id, {"points": 10, "time": 60})
    second = service.submit(race_board.id, alice.id, {"points": 10, "time": 50}, {"lap": 3})

    assert first.resolution is Resolution.INSERTED
    assert second.resolution is Resolution.REPLACED
    assert second.entry.context == {"lap": 3}


def test_submit_commits(test_db, race_board, contestants):
    with db.session() as session:
        _service(session).submit(race_board.id, contestants[0].id, {"points": 1, "time": 1})

    with db.session() as session:
        assert EntryRepository(session).count() == 1


def test_unknown_board_is_not_retried(test_session, contestants, monkeypatch):
    service = _service(test_session)
    calls = []
    original = service.entries.get_board_with_fields

    def tracking(board_id):
        calls.append(board_id)
        return original(board_id)

    monkeypatch.setattr(service.entries, "get_board_with_fields", tracking)

    with pytest.raises(NotFoundError):
        service.submit(9999, contestants[0].id, {"points": 1})
    assert calls == [9999]


def test_unknown_contestant(test_session, race_board):
    with pytest.raises(NotFoundError) as exc_info:
        _service(test_session).submit(race_board.id, 9999, {"points": 1, "time": 1})
    assert exc_info.value.kind == "contestant"


def test_incomplete_submission_leaves_no_entry(test_session, race_board, contestants):
    with pytest.raises(IncompleteSubmissionError):
        _service(test_session).submit(race_board.id, contestants[0].id, {"time": 1})
    assert EntryRepository(test_session).count() == 0


def test_duplicate_insert_retries_as_replace(test_session, race_board, contestants, monkeypatch):
    """A lost first-insert race turns into a comparison against the winner's entry."""
    alice = contestants[0]
    # Another writer already stored an entry
    with db.session() as other:
        SubmissionService(other, locks=KeyedLock()).submit(
            race_board.id, alice.id, {"points": 5, "time": 5}
        )

    service = _service(test_session)
    original_get_entry = service.entries.get_entry
    reads = []

    def stale_first_read(board_id, contestant_id, for_update=False):
        reads.append(for_update)
        if len(reads) == 1:
            return None
        return original_get_entry(board_id, contestant_id, for_update=for_update)

    monkeypatch.setattr(service.entries, "get_entry", stale_first_read)

    outcome = service.submit(race_board.id, alice.id, {"points": 6, "time": 5})

    assert len(reads) == 2
    assert outcome.resolution is Resolution.REPLACED
    assert test_session.query(Entry).count() == 1


def test_retry_recovers_after_transient_conflict(test_session, race_board, contestants, monkeypatch):
    service = _service(test_session, max_retries=3)
    original_insert = service.entries.insert_entry
    attempts = []

    def flaky_insert(candidate):
        attempts.append(candidate)
        if len(attempts) == 1:
            raise DuplicateKeyError(candidate.board_id, candidate.contestant_id)
        return original_insert(candidate)

    monkeypatch.setattr(service.entries, "insert_entry", flaky_insert)

    outcome = service.submit(race_board.id, contestants[0].id, {"points": 1, "time": 1})

    assert outcome.resolution is Resolution.INSERTED
    assert len(attempts) == 2


def test_persistent_conflict_surfaces_after_max_retries(
    test_session, race_board, contestants, monkeypatch
):
    alice = contestants[0]
    service = _service(test_session, max_retries=3)
    service.submit(race_board.id, alice.id, {"points": 1, "time": 1})

    calls = []

    def always_conflict(entry_id, values, context):
        calls.append(entry_id)
        raise ConflictError(race_board.id, alice.id)

    monkeypatch.setattr(service.entries, "replace_entry_values", always_conflict)

    with pytest.raises(ConflictError) as exc_info:
        service.submit(race_board.id, alice.id, {"points": 2, "time": 1})

    assert len(calls) == 3
    assert exc_info.value.attempts == 3
    assert exc_info.value.retryable is True


def test_stale_version_raises_conflict(test_db, race_board, contestants):
    alice = contestants[0]
    with db.session() as session:
        _service(session).submit(race_board.id, alice.id, {"points": 1, "time": 1})

    reader = db.SessionLocal()
    try:
        repo = EntryRepository(reader)
        entry = repo.get_entry(race_board.id, alice.id)
        values = {field_id: 100.0 for field_id in entry.value_map()}

        # Concurrent writer bumps the version after our read
        with db.session() as writer:
            EntryRepository(writer).replace_entry_values(entry.id, values, {"by": "writer"})

        with pytest.raises(ConflictError):
            repo.replace_entry_values(entry.id, values, {"by": "reader"})
    finally:
        reader.rollback()
        reader.close()


def test_version_conflict_is_retried_against_fresh_entry(
    test_session, race_board, contestants, monkeypatch
):
    """Another process improves the entry between our read and our write."""
    alice = contestants[0]
    with db.session() as session:
        _service(session).submit(race_board.id, alice.id, {"points": 1, "time": 1})

    field_ids = {f.name: f.id for f in race_board.fields}
    service = _service(test_session, max_retries=3)
    original_get_entry = service.entries.get_entry
    reads = []

    def read_then_concurrent_write(board_id, contestant_id, for_update=False):
        entry = original_get_entry(board_id, contestant_id, for_update=for_update)
        reads.append(entry.id)
        if len(reads) == 1:
            with db.session() as writer:
                EntryRepository(writer).replace_entry_values(
                    entry.id,
                    {field_ids["points"]: 5.0, field_ids["time"]: 1.0},
                    {"by": "writer"},
                )
        return entry

    monkeypatch.setattr(service.entries, "get_entry", read_then_concurrent_write)

    outcome = service.submit(race_board.id, alice.id, {"points": 9, "time": 1}, {"by": "service"})

    assert len(reads) == 2
    assert outcome.resolution is Resolution.REPLACED
    assert outcome.previous_values == {field_ids["points"]: 5.0, field_ids["time"]: 1.0}

    with db.session() as session:
        stored = EntryRepository(session).get_entry(race_board.id, alice.id)
        assert stored.value_map()[field_ids["points"]] == 9.0
        assert stored.context == {"by": "service"}


def test_concurrent_first_submissions_store_one_entry(test_db, race_board, contestants):
    alice = contestants[0]
    locks = KeyedLock()
    submissions = [{"points": p, "time": 10} for p in (3, 9, 1, 7, 5, 9, 2, 8)]

    def submit(values):
        with db.session() as session:
            outcome = SubmissionService(session, locks=locks, retry_backoff=0).submit(
                race_board.id, alice.id, values
            )
            return outcome.resolution

    with ThreadPoolExecutor(max_workers=4) as pool:
        resolutions = list(pool.map(submit, submissions))

    assert resolutions.count(Resolution.INSERTED) == 1
    assert len(locks) == 0

    with db.session() as session:
        entries = EntryRepository(session).list_entries(board_id=race_board.id)
        assert len(entries) == 1
        assert sorted(entries[0].value_map().values()) == [9.0, 10.0]
