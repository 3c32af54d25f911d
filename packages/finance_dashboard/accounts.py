"""Destination account resolution for sheet imports."""

from __future__ import annotations

import uuid
from decimal import Decimal

from db.models.finance import Account
from sqlalchemy import select
from sqlalchemy.orm import Session

from .logging_setup import get_logger
from .settings import DEFAULT_ACCOUNT_NAME

logger = get_logger(__name__)


def _looks_like_monzo(account: Account) -> bool:
    name = (account.name or "").lower()
    institution = (account.institution or "").lower()
    return "monzo" in name or "monzo" in institution


def ensure_monzo_account_exists(
    session: Session,
    *,
    user_id: uuid.UUID,
    account_name: str = DEFAULT_ACCOUNT_NAME,
) -> uuid.UUID:
    """Return the id of the account imported rows should be attached to.

    Preference order: the user's account whose name or institution mentions
    Monzo, then the user's oldest account, then a newly created GBP checking
    account called ``account_name``.
    """

    accounts = (
        session.execute(
            select(Account)
            .where(Account.user_id == user_id)
            .order_by(Account.created_at, Account.name)
        )
        .scalars()
        .all()
    )

    for account in accounts:
        if _looks_like_monzo(account):
            return account.id
    if accounts:
        return accounts[0].id

    account = Account(
        user_id=user_id,
        name=account_name,
        type="checking",
        institution="Monzo",
        currency="GBP",
        balance=Decimal("0"),
    )
    session.add(account)
    session.flush()
    logger.info("Created account %r for user %s", account_name, user_id)
    return account.id


__all__ = ["ensure_monzo_account_exists"]
