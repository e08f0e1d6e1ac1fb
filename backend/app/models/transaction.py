"""
Realty CRM API - Transaction SQLAlchemy Model
===============================================

What:  ORM model representing the `transactions` table (a property deal).

Columns of note:
    - property_address: JSON, unstructured (street/city/zip or a single line)
    - list_price / final_price: NUMERIC(14, 2); exact decimal money values
    - buyer_client_id / seller_client_id: optional Client ids. These are plain
      UUID columns, not foreign keys, so deleting a client leaves the deal intact.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, Date, Index, Numeric, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.common import OwnedRecordMixin


class Transaction(OwnedRecordMixin, Base):
    """A purchase, sale, or lease the agent is handling."""

    __tablename__ = "transactions"

    transaction_type: Mapped[str] = mapped_column(String(50), nullable=False)

    property_address: Mapped[Optional[Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
    )

    # ── Pricing ───────────────────────────────────────────────────────────
    list_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    final_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)

    # ── Dates ─────────────────────────────────────────────────────────────
    contract_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    closing_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # ── Parties ───────────────────────────────────────────────────────────
    buyer_client_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    seller_client_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )

    status: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    __table_args__ = (
        Index("idx_transactions_user_updated", "user_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, type='{self.transaction_type}', "
            f"status='{self.status}')>"
        )
