"""Person ORM — one row per Person document in the `people` table.

Invariants:
    - id is the 24-hex identifier assigned by the service (never server-generated)
    - email carries a UNIQUE index (ix_people_email): the only uniqueness guard
    - attributes holds every client field other than id/email, replaced wholesale

Design Decisions:
    - JSON column for attributes: document-style records without schema churn
    - String(320) for email: RFC 5321 maximum path length
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from person_api.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Person(Base):
    """Person document."""
    __tablename__ = "people"

    id: Mapped[str] = mapped_column(String(24), primary_key=True)
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True,
    )
    attributes: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=dict,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
