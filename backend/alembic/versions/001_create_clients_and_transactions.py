"""Create clients and transactions tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Baseline schema: `clients` and `transactions`, both owned by a user
       subject and listed newest-updated first.
Rollback: downgrade() drops both tables (all CRM data is lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _owned_record_columns() -> list:
    """id, user_id, created_at, updated_at: shared by every CRM table."""
    return [
        sa.Column(
            "id",
            sa.Uuid(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.String(255),
            nullable=False,
            comment="Subject of the owning user",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "clients",
        *_owned_record_columns(),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("stage", sa.String(50), nullable=True),
        sa.Column("status", sa.String(50), nullable=True),
        sa.Column("lead_score", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(100), nullable=True),
        sa.Column("preferences", postgresql.JSONB(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_clients_user_id", "clients", ["user_id"])
    # Serves: WHERE user_id = :sub ORDER BY updated_at DESC
    op.create_index(
        "idx_clients_user_updated",
        "clients",
        ["user_id", sa.text("updated_at DESC")],
    )

    op.create_table(
        "transactions",
        *_owned_record_columns(),
        sa.Column("transaction_type", sa.String(50), nullable=False),
        sa.Column("property_address", postgresql.JSONB(), nullable=True),
        sa.Column("list_price", sa.Numeric(14, 2), nullable=True),
        sa.Column("final_price", sa.Numeric(14, 2), nullable=True),
        sa.Column("contract_date", sa.Date(), nullable=True),
        sa.Column("closing_date", sa.Date(), nullable=True),
        sa.Column("buyer_client_id", sa.Uuid(as_uuid=True), nullable=True),
        sa.Column("seller_client_id", sa.Uuid(as_uuid=True), nullable=True),
        sa.Column("status", sa.String(50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_transactions_user_id", "transactions", ["user_id"])
    op.create_index(
        "idx_transactions_user_updated",
        "transactions",
        ["user_id", sa.text("updated_at DESC")],
    )


def downgrade() -> None:
    """Drop both tables. Destructive: all client and transaction data is lost."""
    op.drop_index("idx_transactions_user_updated", table_name="transactions")
    op.drop_index("ix_transactions_user_id", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("idx_clients_user_updated", table_name="clients")
    op.drop_index("ix_clients_user_id", table_name="clients")
    op.drop_table("clients")
