"""
API application model.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class Application(Base):
    """
    A client application allowed to call the API.

    Attributes:
        key: Public application key, used as the HTTP Basic username
        secret_hash: SHA-256 hex digest of the application secret
        name: Display name
        admin: Whether the application may manage boards and applications
    """

    __tablename__ = "applications"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    secret_hash: Mapped[str] = mapped_column(String(64))
    name: Mapped[str] = mapped_column(String(255))
    admin: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
