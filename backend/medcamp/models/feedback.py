"""MedCamp Backend — Feedback Model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from medcamp.database import Base
from medcamp.models._columns import created_at_column, id_column


class Feedback(Base):
    """A participant's rating and comment for a camp."""

    __tablename__ = "feedbacks"

    id: Mapped[str] = id_column()
    camp_id: Mapped[str] = mapped_column(String(36), nullable=False)
    participant_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    participant_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("idx_feedbacks_camp_id", "camp_id"),
    )
