"""
Realty CRM API - Client SQLAlchemy Model
==========================================

What:  ORM model representing the `clients` table.
How:   Inherits from Base and OwnedRecordMixin; Alembic reads this for migrations.
Who:   Used by ClientService for CRUD operations.

Table Design:
    - Contact fields: first_name, last_name, email (required), phone
    - CRM fields: type (buyer, seller, ...), stage, status, lead_score, source
    - preferences: free-form JSON (budget, neighbourhoods, bedrooms, ...)
    - notes: free text

    Index on (user_id, updated_at DESC):
        Serves the list query, which always filters by owner and orders by
        most-recently-updated first.
"""

from typing import Any, Optional

from sqlalchemy import JSON, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.common import OwnedRecordMixin


class Client(OwnedRecordMixin, Base):
    """
    A person the agent works with (buyer, seller, landlord, tenant, ...).

    Lifecycle:
        1. Created by POST /api/v1/clients (owner = caller)
        2. Partially updated by PUT /api/v1/clients/{id}
        3. Hard-deleted by DELETE /api/v1/clients/{id}
    """

    __tablename__ = "clients"

    type: Mapped[str] = mapped_column(String(50), nullable=False)

    # ── Contact ───────────────────────────────────────────────────────────
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # ── CRM ───────────────────────────────────────────────────────────────
    stage: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    status: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    lead_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    preferences: Mapped[Optional[Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_clients_user_updated", "user_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Client(id={self.id}, user_id='{self.user_id}', "
            f"name='{self.first_name} {self.last_name}')>"
        )
