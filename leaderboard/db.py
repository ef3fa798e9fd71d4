"""
Engine and session handling.

``db`` is the process-wide handle: the app lifespan calls ``db.initialize()``
on startup and ``db.reset()`` on shutdown. Request handlers receive a
session through ``get_db``; it commits when the handler returns and rolls
back when it raises.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import Settings, get_settings
from .logging import db_logger as logger


class Base(DeclarativeBase):
    """Declarative base shared by every leaderboard model."""


def engine_options(url: str, settings: Settings) -> dict[str, Any]:
    """
    Keyword arguments for ``create_engine``.

    SQLite connections are used from the request threadpool, and an
    in-memory SQLite database exists only on the connection that created
    it, so it gets a single shared connection.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_pre_ping": settings.db_pool_pre_ping,
        }

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if parsed.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
    return options


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # ON DELETE CASCADE from boards and contestants to entries depends on it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine plus session factory, created on ``initialize`` and dropped on ``reset``."""

    def __init__(self) -> None:
        self.engine: Engine | None = None
        self.SessionLocal: sessionmaker[Session] | None = None

    def initialize(self, database_url: str | None = None) -> None:
        """Create the engine for ``database_url`` (default: settings). No-op until ``reset``."""
        if self.engine is not None:
            return

        settings = get_settings()
        url = database_url or settings.database_url
        engine = create_engine(url, echo=settings.debug, **engine_options(url, settings))
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)

        self.engine = engine
        self.SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        logger.info(
            "database_engine_created",
            dialect=engine.dialect.name,
            pool=type(engine.pool).__name__,
        )

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("Database not initialized, call db.initialize() first")
        return self.engine

    def create_all_tables(self) -> None:
        from . import models  # noqa: F401  registers the mappers on Base

        Base.metadata.create_all(bind=self._require_engine())

    @contextmanager
    def session(self) -> Iterator[Session]:
        """A session that commits when the block exits normally and rolls back otherwise."""
        self._require_engine()
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> dict[str, Any]:
        """Round-trip ``SELECT 1``. Returns ``healthy``, ``latency_ms`` and ``error``."""
        if self.engine is None:
            return {"healthy": False, "latency_ms": 0.0, "error": "database not initialized"}

        started = time.perf_counter()
        error = None
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            error = str(exc)
        return {
            "healthy": error is None,
            "latency_ms": round((time.perf_counter() - started) * 1000, 2),
            "error": error,
        }

    def reset(self) -> None:
        """Dispose of the engine so the next ``initialize`` can target another database."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("database_engine_disposed")
        self.engine = None
        self.SessionLocal = None


db = Database()


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding one committed-on-success session per request."""
    with db.session() as session:
        yield session


__all__ = ["Base", "Database", "db", "get_db"]
