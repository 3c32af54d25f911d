from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    func,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


ACCOUNT_TYPES: tuple[str, ...] = (
    "checking",
    "savings",
    "credit_card",
    "loan",
    "mortgage",
    "investment",
    "pension",
    "asset",
    "other",
)

BUDGET_PERIODS: tuple[str, ...] = ("weekly", "monthly", "yearly")

IMPORT_STATUSES: tuple[str, ...] = ("completed", "failed")


def _in_list(column: str, values: tuple[str, ...]) -> str:
    quoted = ",".join(f"'{v}'" for v in values)
    return f"{column} in ({quoted})"


# ---------------------------
# Accounts
# ---------------------------


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # Owner scope. Users live in the auth provider; no FK is declared here.
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    institution: Mapped[str | None] = mapped_column(Text, nullable=True)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, server_default=text("0")
    )
    currency: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'GBP'"))
    external_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_debt: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(_in_list("type", ACCOUNT_TYPES), name="ck_accounts_type"),
        Index("accounts_user_id_idx", "user_id"),
        Index("accounts_external_id_idx", "external_id"),
    )


# ---------------------------
# Categories
# ---------------------------


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("categories.id"), nullable=True
    )
    color: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'#6366f1'"))
    icon: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'tag'"))
    is_system: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True, server_default=text("false")
    )
    # External (Monzo) category label this row stands for. Set only for rows
    # created by the import path; used to recognize already-mapped labels.
    monzo_category: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("categories_user_id_idx", "user_id"),)


# ---------------------------
# Transactions
# ---------------------------


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    occurred_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("categories.id"), nullable=True
    )
    merchant: Mapped[str | None] = mapped_column(Text, nullable=True)
    merchant_logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Source system identifier (Monzo ``tx_...``); the import dedup key.
    external_id: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_excluded_from_budget: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True, server_default=text("false")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        Index("transactions_account_id_idx", "account_id"),
        Index("transactions_date_idx", "date"),
        Index("transactions_category_id_idx", "category_id"),
    )


# ---------------------------
# Budgets and debts (dashboard views)
# ---------------------------


class Budget(Base):
    __tablename__ = "budgets"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("categories.id"), nullable=True
    )
    # Label for budgets that are not tied to a category
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    period: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'monthly'"))
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    # NULL means ongoing
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(_in_list("period", BUDGET_PERIODS), name="ck_budgets_period"),
        Index("budgets_user_id_idx", "user_id"),
    )


class Debt(Base):
    __tablename__ = "debts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False
    )
    original_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # Annual rate as a fraction, e.g. 0.1899 for 18.99%
    interest_rate: Mapped[Decimal] = mapped_column(Numeric(5, 4), nullable=False)
    minimum_payment: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payoff_order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_payoff_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("debts_account_id_idx", "account_id"),)


# ---------------------------
# Import audit trail
# ---------------------------


class ImportLog(Base):
    __tablename__ = "import_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    # e.g. "monzo_sheets:Personal Account Transactions"
    source: Mapped[str] = mapped_column(Text, nullable=False)
    file_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    records_processed: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )
    records_imported: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )
    status: Mapped[str] = mapped_column(String, nullable=False)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(_in_list("status", IMPORT_STATUSES), name="ck_import_logs_status"),
        Index("import_logs_user_id_idx", "user_id"),
    )


__all__ = [
    "ACCOUNT_TYPES",
    "BUDGET_PERIODS",
    "IMPORT_STATUSES",
    "Base",
    "Account",
    "Category",
    "Transaction",
    "Budget",
    "Debt",
    "ImportLog",
]
