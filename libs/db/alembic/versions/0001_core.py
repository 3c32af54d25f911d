# ruff: noqa: I001
"""Core dashboard tables: accounts, categories, transactions, budgets, debts, import logs.

Revision ID: 0001_core
Revises: None
Create Date: 2026-01-16
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    # accounts
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("institution", sa.Text(), nullable=True),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("currency", sa.Text(), nullable=False, server_default=sa.text("'GBP'")),
        sa.Column("external_id", sa.Text(), nullable=True),
        sa.Column("is_debt", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("last_synced_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint(
            "type in ('checking','savings','credit_card','loan','mortgage',"
            "'investment','pension','asset','other')",
            name="ck_accounts_type",
        ),
    )
    op.create_index("accounts_user_id_idx", "accounts", ["user_id"])
    op.create_index("accounts_external_id_idx", "accounts", ["external_id"])

    # categories
    op.create_table(
        "categories",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("parent_id", sa.Uuid(), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("color", sa.Text(), nullable=False, server_default=sa.text("'#6366f1'")),
        sa.Column("icon", sa.Text(), nullable=False, server_default=sa.text("'tag'")),
        sa.Column("is_system", sa.Boolean(), nullable=True, server_default=sa.text("false")),
        sa.Column("monzo_category", sa.Text(), nullable=True),
        _created_at(),
    )
    op.create_index("categories_user_id_idx", "categories", ["user_id"])

    # transactions
    op.create_table(
        "transactions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "account_id",
            sa.Uuid(),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category_id", sa.Uuid(), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("merchant", sa.Text(), nullable=True),
        sa.Column("merchant_logo", sa.Text(), nullable=True),
        sa.Column("external_id", sa.Text(), nullable=True, unique=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "is_excluded_from_budget",
            sa.Boolean(),
            nullable=True,
            server_default=sa.text("false"),
        ),
        _created_at(),
    )
    op.create_index("transactions_account_id_idx", "transactions", ["account_id"])
    op.create_index("transactions_date_idx", "transactions", ["date"])
    op.create_index("transactions_category_id_idx", "transactions", ["category_id"])

    # budgets
    op.create_table(
        "budgets",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("category_id", sa.Uuid(), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("period", sa.Text(), nullable=False, server_default=sa.text("'monthly'")),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        _created_at(),
        sa.CheckConstraint("period in ('weekly','monthly','yearly')", name="ck_budgets_period"),
    )
    op.create_index("budgets_user_id_idx", "budgets", ["user_id"])

    # debts
    op.create_table(
        "debts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "account_id",
            sa.Uuid(),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("original_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("interest_rate", sa.Numeric(5, 4), nullable=False),
        sa.Column("minimum_payment", sa.Numeric(12, 2), nullable=False),
        sa.Column("payoff_order", sa.Integer(), nullable=True),
        sa.Column("target_payoff_date", sa.Date(), nullable=True),
        _created_at(),
    )
    op.create_index("debts_account_id_idx", "debts", ["account_id"])

    # import_logs
    op.create_table(
        "import_logs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("source", sa.Text(), nullable=False),
        sa.Column("file_name", sa.Text(), nullable=True),
        sa.Column("records_processed", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("records_imported", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.CheckConstraint("status in ('completed','failed')", name="ck_import_logs_status"),
    )
    op.create_index("import_logs_user_id_idx", "import_logs", ["user_id"])


def downgrade() -> None:
    op.drop_index("import_logs_user_id_idx", table_name="import_logs")
    op.drop_table("import_logs")
    op.drop_index("debts_account_id_idx", table_name="debts")
    op.drop_table("debts")
    op.drop_index("budgets_user_id_idx", table_name="budgets")
    op.drop_table("budgets")
    op.drop_index("transactions_category_id_idx", table_name="transactions")
    op.drop_index("transactions_date_idx", table_name="transactions")
    op.drop_index("transactions_account_id_idx", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("categories_user_id_idx", table_name="categories")
    op.drop_table("categories")
    op.drop_index("accounts_external_id_idx", table_name="accounts")
    op.drop_index("accounts_user_id_idx", table_name="accounts")
    op.drop_table("accounts")
