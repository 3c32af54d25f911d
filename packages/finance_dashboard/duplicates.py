"""Duplicate lookup for re-imported transactions.

Imports are idempotent because every candidate row is checked against
``transactions.external_id`` before writing: ids already present are skipped,
never rewritten. ``external_id`` is globally unique (one Monzo id can only
belong to one stored transaction), so the lookup is not owner-scoped.
"""

from __future__ import annotations

from collections.abc import Iterable

from db.models.finance import Transaction
from sqlalchemy import select
from sqlalchemy.orm import Session

# Upper bound on ids bound into one IN (...) clause.
LOOKUP_CHUNK_SIZE = 500


def get_existing_external_ids(session: Session, external_ids: Iterable[str]) -> set[str]:
    """Return the subset of ``external_ids`` already stored in ``transactions``.

    An empty input returns an empty set without querying the database.
    """

    candidates = sorted({eid for eid in external_ids if eid})
    if not candidates:
        return set()

    found: set[str] = set()
    for start in range(0, len(candidates), LOOKUP_CHUNK_SIZE):
        chunk = candidates[start : start + LOOKUP_CHUNK_SIZE]
        stmt = select(Transaction.external_id).where(Transaction.external_id.in_(chunk))
        found.update(eid for eid in session.execute(stmt).scalars() if eid)
    return found


__all__ = ["LOOKUP_CHUNK_SIZE", "get_existing_external_ids"]
