"""Column helpers shared by the ORM models."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import mapped_column


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def id_column():
    """Opaque string primary key, generated on insert when not supplied."""
    return mapped_column(String(36), primary_key=True, default=new_id)


def created_at_column():
    return mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this document was created (UTC)",
    )
