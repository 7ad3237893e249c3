"""
MedCamp Backend — Registration Model
======================================

What:  ORM model for the `registrations` collection.

Lifecycle:
    1. Created as payment_status='unpaid', confirmation_status='pending'
    2. Payment recorded → payment_status='paid', confirmation_status='confirmed'
    3. Cancelled (terminal) or deleted (decrements the camp counter)

camp_name / camp_fee / location are a snapshot of the camp taken at
registration time; later camp edits do not change them.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Float, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from medcamp.database import Base
from medcamp.models._columns import created_at_column, id_column


class Registration(Base):
    """A participant's claim on a camp, carrying payment/confirmation state."""

    __tablename__ = "registrations"

    id: Mapped[str] = id_column()

    # Plain string reference: camps and registrations are separate documents,
    # and the camp delete cascade is performed by CampRegistry, not the database.
    camp_id: Mapped[str] = mapped_column(String(36), nullable=False)

    # ── Camp snapshot ─────────────────────────────────────────────────────
    camp_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    camp_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # ── Participant ───────────────────────────────────────────────────────
    participant_email: Mapped[str] = mapped_column(String(320), nullable=False)
    participant_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    emergency_contact: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # ── Status ────────────────────────────────────────────────────────────
    payment_status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="unpaid", server_default=text("'unpaid'"),
    )
    confirmation_status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="pending", server_default=text("'pending'"),
    )
    transaction_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    payment_date: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # True when the camp counter increment after insert failed; cleared by
    # CampRegistry.reconcile_participant_count()
    orphaned: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false"),
    )

    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("idx_registrations_camp_id", "camp_id"),
        Index("idx_registrations_participant_email", "participant_email"),
    )

    def __repr__(self) -> str:
        return (
            f"<Registration(id={self.id}, camp_id={self.camp_id}, "
            f"payment='{self.payment_status}', confirmation='{self.confirmation_status}')>"
        )
