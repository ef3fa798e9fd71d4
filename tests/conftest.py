"""
Pytest fixtures for Leaderboard tests.

Every test gets its own SQLite database file; the global db manager is
pointed at it so services, repositories and the API share one database.
"""

import os

# Settings are read on first import of the package; keep them test-safe
os.environ.setdefault("LEADERBOARD_AUTH_SECRET", "test-auth-secret-0123456789-abcdefghij")
os.environ.setdefault("LEADERBOARD_SUBMISSION_RETRY_BACKOFF", "0")

import pytest  # noqa: E402

from leaderboard.config import get_settings  # noqa: E402
from leaderboard.db import db  # noqa: E402
from leaderboard.models import Board, Contestant, Field  # noqa: E402


@pytest.fixture(scope="function")
def test_db(tmp_path, monkeypatch):
    """Create a fresh test database for each test."""
    db_url = f"sqlite:///{tmp_path / 'leaderboard_test.db'}"
    monkeypatch.setenv("LEADERBOARD_DATABASE_URL", db_url)
    get_settings.cache_clear()

    db.reset()
    db.initialize(db_url)
    db.create_all_tables()

    yield db_url, db.SessionLocal, db.engine

    # Cleanup
    db.reset()
    get_settings.cache_clear()


@pytest.fixture
def test_session(test_db):
    """Get a test session from the test database."""
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def _create_board(session, name, fields):
    board = Board(
        name=name,
        fields=[
            Field(name=field_name, sort_order=sort_order, sort_descending=descending)
            for field_name, sort_order, descending in fields
        ],
    )
    session.add(board)
    session.flush()
    return board


@pytest.fixture
def race_board(test_session):
    """Board ranked by points (higher first), then time (lower first)."""
    board = _create_board(
        test_session,
        "Race",
        [("points", 0, True), ("time", 1, False)],
    )
    test_session.commit()
    return board


@pytest.fixture
def contestants(test_session):
    """Three contestants: alice, bob and carol."""
    created = [Contestant(name=name) for name in ("alice", "bob", "carol")]
    test_session.add_all(created)
    test_session.commit()
    return created


@pytest.fixture
def make_board(test_session):
    """Factory for boards with (name, sort_order, sort_descending) field tuples."""

    def _make(name, fields):
        board = _create_board(test_session, name, fields)
        test_session.commit()
        return board

    return _make
