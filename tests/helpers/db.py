"""DB helpers for tests: bootstrap a temporary SQLite DB and seed owner data."""

from __future__ import annotations

import uuid
from decimal import Decimal
from pathlib import Path

from db import Base
from db.client import get_engine, session_scope
from db.models.finance import Account, Category


def bootstrap_sqlite_db(db_file: Path) -> str:
    """Create a SQLite database file, initialize schema, and return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    # db.client turns on foreign key enforcement for SQLite engines
    engine = get_engine(database_url=url)
    Base.metadata.create_all(bind=engine)
    return url


def seed_account(
    *,
    database_url: str,
    user_id: uuid.UUID,
    name: str,
    institution: str | None = None,
    type: str = "checking",
) -> uuid.UUID:
    with session_scope(database_url=database_url) as session:
        account = Account(
            user_id=user_id,
            name=name,
            type=type,
            institution=institution,
            currency="GBP",
            balance=Decimal("0"),
        )
        session.add(account)
        session.flush()
        return account.id


def seed_category(
    *,
    database_url: str,
    user_id: uuid.UUID,
    name: str,
    monzo_category: str | None = None,
) -> uuid.UUID:
    with session_scope(database_url=database_url) as session:
        category = Category(user_id=user_id, name=name, monzo_category=monzo_category)
        session.add(category)
        session.flush()
        return category.id
