"""
MedCamp Backend — User Model
==============================

Emails are stored lowercased (UserDirectory normalizes before every write
and lookup), so the unique constraint is effectively case-insensitive.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column

from medcamp.database import Base
from medcamp.models._columns import created_at_column, id_column, utcnow


class User(Base):
    """A platform user: plain user, organizer, or participant."""

    __tablename__ = "users"

    id: Mapped[str] = id_column()
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    photo: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    role: Mapped[str] = mapped_column(
        String(16), nullable=False, default="user", server_default=text("'user'"),
    )
    created_at: Mapped[datetime] = created_at_column()
    last_log_in: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=utcnow,
    )

    def __repr__(self) -> str:
        return f"<User(email='{self.email}', role='{self.role}')>"
