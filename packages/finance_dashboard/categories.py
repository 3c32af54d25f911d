"""Category reconciliation for imported Monzo labels.

Every external (Monzo) category label seen in an import must map to a row in
``categories`` owned by the importing user. Rows created here carry the label
in ``monzo_category`` and ``is_system=True``; the import path never updates or
deletes an existing category.

Exports
-------
- ``MONZO_CATEGORY_STYLES``: static label → (color, icon) table.
- ``style_for(label)``: style lookup with the generic fallback.
- ``ensure_categories_exist(...)``: idempotent reconcile returning
  ``{label: category_id}``.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from db.models.finance import Category
from sqlalchemy import select
from sqlalchemy.orm import Session

from .logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CategoryStyle:
    color: str
    icon: str


DEFAULT_STYLE = CategoryStyle(color="#6366f1", icon="tag")

MONZO_CATEGORY_STYLES: Mapping[str, CategoryStyle] = MappingProxyType(
    {
        "Bills": CategoryStyle("#ef4444", "receipt"),
        "Charity": CategoryStyle("#ec4899", "heart"),
        "Eating out": CategoryStyle("#f97316", "utensils"),
        "Entertainment": CategoryStyle("#a855f7", "film"),
        "Expenses": CategoryStyle("#64748b", "briefcase"),
        "Family": CategoryStyle("#14b8a6", "users"),
        "Finances": CategoryStyle("#3b82f6", "landmark"),
        "General": CategoryStyle("#6366f1", "tag"),
        "Gifts": CategoryStyle("#f43f5e", "gift"),
        "Groceries": CategoryStyle("#22c55e", "shopping-cart"),
        "Holidays": CategoryStyle("#06b6d4", "plane"),
        "Personal care": CategoryStyle("#d946ef", "heart"),
        "Shopping": CategoryStyle("#eab308", "shopping-bag"),
        "Transport": CategoryStyle("#0ea5e9", "car"),
        "Transfers": CategoryStyle("#8b5cf6", "arrow-right-left"),
    }
)


def style_for(label: str) -> CategoryStyle:
    """Return the color/icon pair for ``label`` (exact match), else the default."""

    return MONZO_CATEGORY_STYLES.get(label, DEFAULT_STYLE)


def load_category_map(session: Session, *, user_id: uuid.UUID) -> dict[str, uuid.UUID]:
    """Return ``{monzo_category: id}`` for the user's categories that carry a label."""

    rows = session.execute(
        select(Category.monzo_category, Category.id).where(Category.user_id == user_id)
    ).all()
    return {label: cid for label, cid in rows if label}


def ensure_categories_exist(
    session: Session,
    *,
    user_id: uuid.UUID,
    monzo_categories: Iterable[str],
) -> dict[str, uuid.UUID]:
    """Ensure each non-empty label has a category and return ``{label: id}``.

    Existing categories are recognized by ``monzo_category``. Missing labels
    are created together in one flush, in first-seen order. Re-running with
    labels that are already mapped performs no writes. The caller owns the
    transaction (commit/rollback).
    """

    category_map = load_category_map(session, user_id=user_id)

    missing: list[str] = []
    seen: set[str] = set()
    for label in monzo_categories:
        if not label or label in category_map or label in seen:
            continue
        seen.add(label)
        missing.append(label)

    if not missing:
        return category_map

    new_rows = []
    for label in missing:
        style = style_for(label)
        new_rows.append(
            Category(
                user_id=user_id,
                name=label,
                monzo_category=label,
                color=style.color,
                icon=style.icon,
                is_system=True,
            )
        )
    session.add_all(new_rows)
    session.flush()

    for row in new_rows:
        category_map[row.monzo_category or row.name] = row.id

    logger.info("Created %d categories for user %s: %s", len(new_rows), user_id, ", ".join(missing))
    return category_map


__all__ = [
    "CategoryStyle",
    "DEFAULT_STYLE",
    "MONZO_CATEGORY_STYLES",
    "style_for",
    "load_category_map",
    "ensure_categories_exist",
]
