"""
MedCamp Backend — Payment Model
=================================

What:  ORM model for the append-only `payments` collection.

transaction_id is unique: recording the same provider transaction twice
raises DuplicateKeyError at the store, which the ledger treats as an
idempotent replay.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from medcamp.database import Base
from medcamp.models._columns import created_at_column, id_column


class Payment(Base):
    """A completed payment for a registration."""

    __tablename__ = "payments"

    id: Mapped[str] = id_column()
    registration_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    participant_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    camp_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    payment_status: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    confirmation_status: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    transaction_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    payment_date: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("idx_payments_participant_email", "participant_email"),
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, transaction_id='{self.transaction_id}', amount={self.amount})>"
