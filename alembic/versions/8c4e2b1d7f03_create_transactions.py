"""Create transactions table

Revision ID: 8c4e2b1d7f03
Revises: 3a1f0c9d2b7e
Create Date: 2026-10-26 09:41:07.553012

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "8c4e2b1d7f03"
down_revision = "3a1f0c9d2b7e"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Add the imported transactions table."""
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("provider_transaction_id", sa.String(), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=True),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=True),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("raw", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("account_id", "provider_transaction_id", name="uq_transactions_provider_id"),
    )
    op.create_index("ix_transactions_account_id", "transactions", ["account_id"])


def downgrade() -> None:
    """Drop the imported transactions table."""
    op.drop_index("ix_transactions_account_id", table_name="transactions")
    op.drop_table("transactions")
