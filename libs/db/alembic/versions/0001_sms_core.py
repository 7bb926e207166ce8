# ruff: noqa: I001
"""SMS ledger tables: transactions and sender rules.

Revision ID: 0001_sms_core
Revises: None
Create Date: 2026-10-18
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_sms_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # sms_transactions
    op.create_table(
        "sms_transactions",
        sa.Column("pk", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("public_id", sa.String(36), nullable=False, unique=True),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column(
            "currency",
            sa.CHAR(3),
            nullable=False,
            server_default=sa.text("'USD'"),
        ),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("direction", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("raw_sms", sa.Text(), nullable=True),
        sa.Column("sender", sa.String(), nullable=True),
        sa.Column(
            "source",
            sa.String(),
            nullable=False,
            server_default=sa.text("'manual'"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.CheckConstraint(
            "direction in ('income','expense')",
            name="ck_sms_tx_direction",
        ),
        sa.CheckConstraint(
            "source in ('local','remote','manual')",
            name="ck_sms_tx_source",
        ),
        sa.CheckConstraint("amount > 0", name="ck_sms_tx_amount_positive"),
    )
    op.create_index("ix_sms_transactions_date", "sms_transactions", ["date"], unique=False)
    op.create_index(
        "ix_sms_transactions_category", "sms_transactions", ["category"], unique=False
    )

    # sms_sender_rules
    op.create_table(
        "sms_sender_rules",
        sa.Column("pk", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("public_id", sa.String(36), nullable=False, unique=True),
        sa.Column("sender_name", sa.String(), nullable=False),
        sa.Column(
            "auto_process",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column("default_category", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )


def downgrade() -> None:
    op.drop_table("sms_sender_rules")
    op.drop_index("ix_sms_transactions_category", table_name="sms_transactions")
    op.drop_index("ix_sms_transactions_date", table_name="sms_transactions")
    op.drop_table("sms_transactions")
