"""Base repository class with common CRUD operations."""

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from leaderboard.db import Base
from leaderboard.exceptions import NotFoundError

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Usage:
        class ContestantRepository(BaseRepository[Contestant]):
            model = Contestant
            kind = "contestant"

        repo = ContestantRepository(session)
        contestant = repo.get_or_raise(1)
    """

    model: type[T]
    kind: str = "record"

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id: Any) -> T | None:
        """Get a single record by primary key."""
        return self.session.get(self.model, id)

    def get_or_raise(self, id: Any) -> T:
        """Get a single record by primary key or raise NotFoundError."""
        instance = self.get_by_id(id)
        if instance is None:
            raise NotFoundError(self.kind, id)
        return instance

    def get_all(self) -> list[T]:
        """Get all records in primary key order."""
        pk = self.model.__mapper__.primary_key[0]
        return list(self.session.scalars(select(self.model).order_by(pk)))

    def get_many(self, ids: Iterable[Any]) -> list[T]:
        """Get the records with the given primary keys (missing ones are skipped)."""
        ids = list(set(ids))
        if not ids:
            return []
        pk = self.model.__mapper__.primary_key[0]
        return list(self.session.scalars(select(self.model).where(pk.in_(ids))))

    def create(self, **kwargs) -> T:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.flush()
        return instance

    def update(self, id: Any, **kwargs) -> T:
        """Update an existing record, ignoring None values."""
        instance = self.get_or_raise(id)
        for key, value in kwargs.items():
            if value is None:
                continue
            if not hasattr(instance, key):
                raise ValueError(f"Unknown attribute {key!r} for {self.kind}")
            setattr(instance, key, value)
        self.session.flush()
        return instance

    def delete(self, id: Any) -> None:
        """Delete a record by primary key."""
        instance = self.get_or_raise(id)
        self.session.delete(instance)
        self.session.flush()

    def count(self, **filters) -> int:
        """Get count of records, optionally filtered."""
        query = select(func.count()).select_from(self.model)
        for key, value in filters.items():
            if not hasattr(self.model, key):
                raise ValueError(f"Unknown filter key {key!r} for {self.kind}")
            query = query.where(getattr(self.model, key) == value)
        return self.session.scalar(query) or 0
