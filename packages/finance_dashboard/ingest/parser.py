"""Batch parsing of a Monzo sheet grid into parsed transactions.

The first row of the grid is always the header and is skipped without being
inspected. Each later row is decoded and normalized independently; a row that
raises is recorded as a :class:`~finance_dashboard.models.ParseError` and the
remaining rows are still processed. Rows the normalizer rejects as
non-transactions (blank id/date, repeated header) are dropped silently.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..logging_setup import get_logger
from ..models import DateRange, ParsedSheet, ParsedTransaction, ParseError
from .adapters.monzo_sheet import decode_row, to_parsed_transaction

logger = get_logger(__name__)


def parse_sheet_data(
    rows: Sequence[Sequence[str | None]], *, strict_amounts: bool = False
) -> ParsedSheet:
    """Parse every data row of ``rows``.

    Error rows are numbered 1-indexed with the header as row 1, i.e. grid
    index ``i`` is reported as row ``i + 1``.
    """

    transactions: list[ParsedTransaction] = []
    errors: list[ParseError] = []

    for i in range(1, len(rows)):
        try:
            parsed = to_parsed_transaction(decode_row(rows[i]), strict_amounts=strict_amounts)
        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.warning("Skipping sheet row %d: %s", i + 1, message)
            errors.append(ParseError(row=i + 1, message=message))
            continue
        if parsed is not None:
            transactions.append(parsed)

    logger.info(
        "Parsed %d data rows: %d transactions, %d errors",
        max(len(rows) - 1, 0),
        len(transactions),
        len(errors),
    )
    return ParsedSheet(transactions=transactions, errors=errors)


def filter_by_date_range(
    transactions: Iterable[ParsedTransaction], date_range: DateRange | None
) -> list[ParsedTransaction]:
    """Keep transactions whose calendar date falls inside ``date_range`` (inclusive)."""

    items = list(transactions)
    if date_range is None:
        return items
    kept: list[ParsedTransaction] = []
    for t in items:
        day = t.occurred_at.date()
        if date_range.start is not None and day < date_range.start:
            continue
        if date_range.end is not None and day > date_range.end:
            continue
        kept.append(t)
    return kept


def external_ids(transactions: Iterable[ParsedTransaction]) -> list[str]:
    """Return the external ids of ``transactions`` in input order."""

    return [t.external_id for t in transactions]


__all__ = ["parse_sheet_data", "filter_by_date_range", "external_ids"]
