"""Create medcamp tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the five collections backing the document store: users,
       camps, registrations, payments, feedbacks.
How:   String(36) UUID-text primary keys generated by the application,
       TIMESTAMP WITH TIME ZONE for creation times. Unique constraints on
       users.email and payments.transaction_id back the store's duplicate
       key detection.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
        comment="When this document was created (UTC)",
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("photo", sa.String(1024), nullable=True),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("role", sa.String(16), nullable=False, server_default=sa.text("'user'")),
        _created_at(),
        sa.Column("last_log_in", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "camps",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("date", sa.String(32), nullable=True),
        sa.Column("time", sa.String(32), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("fee", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("healthcare_professional", sa.String(255), nullable=True),
        sa.Column("organizer_email", sa.String(320), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column(
            "participant_count",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Number of live registrations (maintained by the registration lifecycle)",
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_camps_created_at", "camps", ["created_at"])

    op.create_table(
        "registrations",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("camp_id", sa.String(36), nullable=False),
        sa.Column("camp_name", sa.String(255), nullable=True),
        sa.Column("camp_fee", sa.Float(), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("participant_email", sa.String(320), nullable=False),
        sa.Column("participant_name", sa.String(255), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("phone", sa.String(64), nullable=True),
        sa.Column("gender", sa.String(32), nullable=True),
        sa.Column("emergency_contact", sa.String(64), nullable=True),
        sa.Column("payment_status", sa.String(16), nullable=False, server_default=sa.text("'unpaid'")),
        sa.Column(
            "confirmation_status", sa.String(16), nullable=False, server_default=sa.text("'pending'"),
        ),
        sa.Column("transaction_id", sa.String(255), nullable=True),
        sa.Column("payment_date", sa.String(64), nullable=True),
        sa.Column("orphaned", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_registrations_camp_id", "registrations", ["camp_id"])
    op.create_index("idx_registrations_participant_email", "registrations", ["participant_email"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("registration_id", sa.String(36), nullable=True),
        sa.Column("participant_email", sa.String(320), nullable=True),
        sa.Column("camp_name", sa.String(255), nullable=True),
        sa.Column("amount", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("payment_status", sa.String(16), nullable=True),
        sa.Column("confirmation_status", sa.String(16), nullable=True),
        sa.Column("transaction_id", sa.String(255), nullable=False),
        sa.Column("payment_date", sa.String(64), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("transaction_id"),
    )
    op.create_index("idx_payments_participant_email", "payments", ["participant_email"])

    op.create_table(
        "feedbacks",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("camp_id", sa.String(36), nullable=False),
        sa.Column("participant_email", sa.String(320), nullable=True),
        sa.Column("participant_name", sa.String(255), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_feedbacks_camp_id", "feedbacks", ["camp_id"])


def downgrade() -> None:
    """Drop every table. All data is lost."""
    op.drop_index("idx_feedbacks_camp_id", table_name="feedbacks")
    op.drop_table("feedbacks")
    op.drop_index("idx_payments_participant_email", table_name="payments")
    op.drop_table("payments")
    op.drop_index("idx_registrations_participant_email", table_name="registrations")
    op.drop_index("idx_registrations_camp_id", table_name="registrations")
    op.drop_table("registrations")
    op.drop_index("idx_camps_created_at", table_name="camps")
    op.drop_table("camps")
    op.drop_table("users")
