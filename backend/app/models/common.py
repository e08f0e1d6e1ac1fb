"""
Realty CRM API - Shared Columns for Owned Records
===================================================

What:  Mixin declaring the identity, ownership and timestamp columns that
       every CRM table carries.
How:   SQLAlchemy declarative mixin; Client and Transaction inherit it
       alongside Base.

Columns:
    id          UUID primary key, generated in Python on insert
    user_id     subject (`sub`) of the owning user; every query filters on it
    created_at  set once on insert (UTC)
    updated_at  set on insert and bumped on every update (UTC); list order key
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OwnedRecordMixin:
    """Identity, owner reference and timestamps for a user-owned row."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Subjects from the identity provider are opaque strings (e.g. "auth0|64f...")
    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Subject of the owning user",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
