"""
Entry and value models.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow

if TYPE_CHECKING:
    from .board import Board, Field
    from .contestant import Contestant


class Entry(Base):
    """
    The single best-known result of one contestant on one board.

    Entries are only written by the conflict resolver: created on the first
    submission, overwritten in place when a better result arrives. The
    version column makes concurrent overwrites fail instead of silently
    losing an update.
    """

    __tablename__ = "entries"
    __table_args__ = (
        UniqueConstraint("board_id", "contestant_id", name="uq_entries_board_contestant"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    board_id: Mapped[int] = mapped_column(ForeignKey("boards.id", ondelete="CASCADE"), index=True)
    contestant_id: Mapped[int] = mapped_column(
        ForeignKey("contestants.id", ondelete="CASCADE"), index=True
    )
    context: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    board: Mapped["Board"] = relationship("Board", back_populates="entries")
    contestant: Mapped["Contestant"] = relationship("Contestant", back_populates="entries")
    values: Mapped[List["Value"]] = relationship(
        "Value",
        back_populates="entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def value_map(self) -> dict[int, float]:
        """Values keyed by field id."""
        return {value.field_id: value.value for value in self.values}


class Value(Base):
    """One field's reading within an entry."""

    __tablename__ = "entry_values"
    __table_args__ = (
        UniqueConstraint("entry_id", "field_id", name="uq_entry_values_entry_field"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    entry_id: Mapped[int] = mapped_column(ForeignKey("entries.id", ondelete="CASCADE"), index=True)
    field_id: Mapped[int] = mapped_column(ForeignKey("fields.id", ondelete="CASCADE"), index=True)
    value: Mapped[float] = mapped_column(Float)

    entry: Mapped["Entry"] = relationship("Entry", back_populates="values")
    field: Mapped["Field"] = relationship("Field")
