"""
Board and field models.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow

if TYPE_CHECKING:
    from .entry import Entry


class Board(Base):
    """
    A named leaderboard with a fixed, ordered set of fields.

    Fields are created together with the board and are not modified afterwards.
    Deleting a board deletes its fields and entries.
    """

    __tablename__ = "boards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    fields: Mapped[List["Field"]] = relationship(
        "Field",
        back_populates="board",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Field.sort_order",
        lazy="selectin",
    )
    entries: Mapped[List["Entry"]] = relationship(
        "Entry", back_populates="board", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def ordered_fields(self) -> list["Field"]:
        """Fields in comparison priority order."""
        from leaderboard.ranking.comparator import ordered_fields

        return ordered_fields(self.fields)

    def field_by_name(self, name: str) -> "Field | None":
        """The field called ``name``, or None when the board has no such field."""
        for field in self.fields:
            if field.name == name:
                return field
        return None


class Field(Base):
    """
    One ranked metric of a board.

    Attributes:
        name: Unique within the board
        sort_order: Tie-break priority, lower values are compared first
        sort_descending: True when larger raw values rank better (points),
            False when smaller raw values rank better (elapsed time)
    """

    __tablename__ = "fields"
    __table_args__ = (
        UniqueConstraint("board_id", "name", name="uq_fields_board_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    board_id: Mapped[int] = mapped_column(ForeignKey("boards.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255))
    sort_order: Mapped[int] = mapped_column(Integer)
    sort_descending: Mapped[bool] = mapped_column(Boolean)

    board: Mapped["Board"] = relationship("Board", back_populates="fields")
