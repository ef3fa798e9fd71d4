"""Tests for engine options and the database handle."""

import pytest
from sqlalchemy.pool import StaticPool

from leaderboard.config import Settings
from leaderboard.db import Database, engine_options
from leaderboard.models import Contestant


def test_memory_sqlite_uses_single_connection():
    options = engine_options("sqlite://", Settings())
    assert options["poolclass"] is StaticPool
    assert options["connect_args"] == {"check_same_thread": False}


def test_file_sqlite_keeps_default_pool(tmp_path):
    options = engine_options(f"sqlite:///{tmp_path / 'lb.db'}", Settings())
    assert "poolclass" not in options


def test_server_database_uses_pool_settings(monkeypatch):
    monkeypatch.setenv("LEADERBOARD_DB_POOL_SIZE", "4")
    options = engine_options("postgresql://user@localhost/lb", Settings())
    assert options == {"pool_size": 4, "max_overflow": 20, "pool_pre_ping": True}


def test_uninitialized_database():
    database = Database()
    assert database.health_check()["healthy"] is False
    with pytest.raises(RuntimeError):
        with database.session():
            pass


def test_in_memory_database_is_shared_between_sessions():
    database = Database()
    database.initialize("sqlite://")
    try:
        database.create_all_tables()
        with database.session() as session:
            session.add(Contestant(name="dora"))
        with database.session() as session:
            assert [c.name for c in session.query(Contestant)] == ["dora"]
        assert database.health_check()["healthy"] is True
    finally:
        database.reset()
    assert database.engine is None
