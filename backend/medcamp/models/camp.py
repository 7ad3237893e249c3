"""
MedCamp Backend — Camp Model
==============================

What:  ORM model for the `camps` collection.
Who:   Written by CampRegistry; counter adjusted by RegistrationLifecycle.

participant_count is only ever changed through an atomic
`UPDATE camps SET participant_count = participant_count + :delta`
(DocumentStore.update_one with `inc`) or by reconciliation.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Float, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from medcamp.database import Base
from medcamp.models._columns import created_at_column, id_column


class Camp(Base):
    """A medical camp that participants register for."""

    __tablename__ = "camps"

    id: Mapped[str] = id_column()

    # Nullable: a camp inserted by an update may carry only the patched fields
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    # Schedule is stored as entered by the organizer (e.g. "2024-01-01", "10:00")
    date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    time: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    fee: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    healthcare_professional: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    organizer_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)

    # Image URLs; at least one is required at creation
    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    participant_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Number of live registrations (maintained by the registration lifecycle)",
    )

    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("idx_camps_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Camp(id={self.id}, title='{self.title}', participants={self.participant_count})>"
