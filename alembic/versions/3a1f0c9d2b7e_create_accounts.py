"""Create accounts table

Revision ID: 3a1f0c9d2b7e
Revises:
Create Date: 2026-10-19 10:12:31.284119

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3a1f0c9d2b7e"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("account_type", sa.String(length=50), nullable=False, server_default="checking"),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="EUR"),
        sa.Column("linked_id", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_accounts_linked_id", "accounts", ["linked_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_accounts_linked_id", table_name="accounts")
    op.drop_table("accounts")
