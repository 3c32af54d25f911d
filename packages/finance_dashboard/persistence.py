# ruff: noqa: I001
"""Persistence for imported transactions and the import audit log.

Functions here write to the shared database owned by ``libs/db`` through a
caller-provided SQLAlchemy session.

Scope:
- Write new transactions in fixed-size batches, committing each batch. When a
  batch is rejected as a unit, its records are retried one at a time so that
  a single bad record only loses itself (see :func:`write_with_fallback`).
- Append ``import_logs`` entries and read them back for import history.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Generic, TypeVar

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.finance import ImportLog, Transaction
from .duplicates import get_existing_external_ids
from .ingest.parser import external_ids
from .logging_setup import get_logger
from .models import ImportRowError, ParsedTransaction, TransactionKind, WriteSummary

logger = get_logger(__name__)

BATCH_SIZE = 100
TRANSFERS_CATEGORY = "Transfers"
_FALLBACK_ERROR = "Failed to insert transaction"

ItemT = TypeVar("ItemT")


# ---------------------------
# Row values
# ---------------------------


def is_excluded_from_budget(tx: ParsedTransaction) -> bool:
    """Pot transfers and Monzo "Transfers" are money movements, not spending."""

    return tx.kind == TransactionKind.POT_TRANSFER or tx.category == TRANSFERS_CATEGORY


def _to_decimal_2(d: Decimal) -> Decimal:
    return d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def build_transaction_values(
    tx: ParsedTransaction,
    *,
    account_id: uuid.UUID,
    category_map: Mapping[str, uuid.UUID],
) -> dict[str, Any]:
    """Return the ``transactions`` column values for one parsed transaction."""

    return {
        "account_id": account_id,
        "amount": _to_decimal_2(tx.amount),
        "date": tx.occurred_at.date(),
        "occurred_at": tx.occurred_at,
        "description": tx.description,
        "merchant": tx.merchant,
        "external_id": tx.external_id,
        "notes": tx.notes,
        # Unmapped labels leave the category unset.
        "category_id": category_map.get(tx.category),
        "is_excluded_from_budget": is_excluded_from_budget(tx),
    }


# ---------------------------
# Two-tier write strategy
# ---------------------------


@dataclass(frozen=True)
class BatchOutcome(Generic[ItemT]):
    """Result of writing one batch.

    ``failures`` pairs each record that could not be written with the
    store's error message. ``used_fallback`` is ``True`` when the bulk write
    was rejected and records were written one by one.
    """

    written: int
    failures: tuple[tuple[ItemT, str], ...]
    used_fallback: bool


def write_with_fallback(
    items: Sequence[ItemT],
    *,
    write_batch: Callable[[Sequence[ItemT]], str | None],
    write_one: Callable[[ItemT], str | None],
) -> BatchOutcome[ItemT]:
    """Write ``items`` in bulk, falling back to per-item writes on failure.

    ``write_batch`` and ``write_one`` return ``None`` on success or an error
    message on failure; they must leave the store unchanged when they fail.
    Every item is attempted in the fallback tier regardless of earlier
    failures.
    """

    if not items:
        return BatchOutcome(written=0, failures=(), used_fallback=False)

    batch_error = write_batch(items)
    if batch_error is None:
        return BatchOutcome(written=len(items), failures=(), used_fallback=False)

    logger.warning(
        "Batch of %d records rejected (%s); retrying one by one", len(items), batch_error
    )
    written = 0
    failures: list[tuple[ItemT, str]] = []
    for item in items:
        error = write_one(item)
        if error is None:
            written += 1
        else:
            failures.append((item, error))
    return BatchOutcome(written=written, failures=tuple(failures), used_fallback=True)


def _error_message(exc: SQLAlchemyError) -> str:
    # Prefer the driver's message over SQLAlchemy's statement-annotated text.
    orig = getattr(exc, "orig", None)
    return str(orig or exc) or _FALLBACK_ERROR


def _insert_committed(session: Session, values: list[dict[str, Any]]) -> str | None:
    """Insert ``values`` and commit; on failure roll back and return the message."""

    try:
        session.execute(insert(Transaction), values)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        return _error_message(e)
    return None


def chunked(items: Sequence[ItemT], size: int) -> Iterator[Sequence[ItemT]]:
    """Yield consecutive slices of ``items`` of at most ``size`` elements."""

    if size <= 0:
        raise ValueError("size must be positive")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def import_transactions(
    session: Session,
    *,
    account_id: uuid.UUID,
    transactions: Sequence[ParsedTransaction],
    category_map: Mapping[str, uuid.UUID],
) -> WriteSummary:
    """Write transactions that are not stored yet; skip the ones that are.

    Writes are committed batch by batch (``BATCH_SIZE`` records), so pending
    work in ``session`` is committed by the first write. Records that fail even
    when written alone are reported as ``ImportRowError`` with ``row=0``: the
    sheet position is not known at this stage.
    """

    existing = get_existing_external_ids(session, external_ids(transactions))
    new_transactions = [t for t in transactions if t.external_id not in existing]
    skipped = len(transactions) - len(new_transactions)

    if not new_transactions:
        return WriteSummary(imported=0, skipped=skipped, errors=())

    def _values(tx: ParsedTransaction) -> dict[str, Any]:
        return build_transaction_values(tx, account_id=account_id, category_map=category_map)

    imported = 0
    errors: list[ImportRowError] = []
    for batch in chunked(new_transactions, BATCH_SIZE):
        outcome = write_with_fallback(
            batch,
            write_batch=lambda items: _insert_committed(session, [_values(t) for t in items]),
            write_one=lambda t: _insert_committed(session, [_values(t)]),
        )
        imported += outcome.written
        for tx, message in outcome.failures:
            logger.warning("Could not import transaction %s: %s", tx.external_id, message)
            errors.append(ImportRowError(row=0, transaction_id=tx.external_id, message=message))

    return WriteSummary(imported=imported, skipped=skipped, errors=tuple(errors))


# ---------------------------
# Import log
# ---------------------------


def log_import(
    session: Session,
    *,
    user_id: uuid.UUID,
    source: str,
    records_processed: int,
    records_imported: int,
    status: str,
    error_message: str | None = None,
    file_name: str | None = None,
) -> ImportLog:
    """Append one ``import_logs`` row (flushed; the caller commits)."""

    entry = ImportLog(
        user_id=user_id,
        source=source,
        file_name=file_name,
        records_processed=records_processed,
        records_imported=records_imported,
        status=status,
        error_message=error_message or None,
        completed_at=datetime.now(UTC),
    )
    session.add(entry)
    session.flush()
    return entry


def list_import_logs(session: Session, *, user_id: uuid.UUID, limit: int = 20) -> list[ImportLog]:
    """Return the user's most recent import log entries, newest first."""

    stmt = (
        select(ImportLog)
        .where(ImportLog.user_id == user_id)
        .order_by(ImportLog.completed_at.desc(), ImportLog.created_at.desc())
        .limit(limit)
    )
    return list(session.execute(stmt).scalars().all())


__all__ = [
    "BATCH_SIZE",
    "TRANSFERS_CATEGORY",
    "BatchOutcome",
    "is_excluded_from_budget",
    "build_transaction_values",
    "write_with_fallback",
    "chunked",
    "import_transactions",
    "log_import",
    "list_import_logs",
]
