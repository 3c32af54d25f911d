"""Adapter for the Monzo "auto-export" transaction spreadsheet.

Sheet columns (A-P, positional, exact order):

    Transaction ID, Date, Time, Type, Name, Emoji, Category, Amount, Currency,
    Local amount, Local currency, Notes and #tags, Address, Receipt,
    Description, Category split

Two steps live here:

- :func:`decode_row` reshapes a raw row (list of cell strings) into a
  :class:`MonzoSheetRow`. It never fails; absent or ``None`` cells become ``""``.
- :func:`to_parsed_transaction` turns a decoded row into a
  :class:`~finance_dashboard.models.ParsedTransaction`, or ``None`` for header
  and blank rows. Malformed dates/times raise ``ValueError``; the batch parser
  records those as row errors.

Dates are ``DD/MM/YYYY`` and times ``HH:MM:SS`` (UK export). Amounts carry an
optional currency symbol and thousands separators, e.g. ``-£1,234.56``.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, fields
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ...logging_setup import get_logger
from ...models import ParsedTransaction, TransactionKind

logger = get_logger(__name__)

SHEET_COLUMNS: tuple[str, ...] = (
    "Transaction ID",
    "Date",
    "Time",
    "Type",
    "Name",
    "Emoji",
    "Category",
    "Amount",
    "Currency",
    "Local amount",
    "Local currency",
    "Notes and #tags",
    "Address",
    "Receipt",
    "Description",
    "Category split",
)

HEADER_TRANSACTION_ID = SHEET_COLUMNS[0]
DEFAULT_CATEGORY = "General"
UNKNOWN_DESCRIPTION = "Unknown transaction"
NOTES_SEPARATOR = " | "
# Stored as Numeric(12, 2): at most ten integer digits once rounded to pence.
AMOUNT_LIMIT = Decimal("10000000000")

# Evaluated in order; the first keyword contained in the squashed type text wins.
TYPE_KEYWORDS: tuple[tuple[str, TransactionKind], ...] = (
    ("cardpayment", TransactionKind.CARD_PAYMENT),
    ("pottransfer", TransactionKind.POT_TRANSFER),
    ("fasterpayment", TransactionKind.FASTER_PAYMENT),
    ("monzopaid", TransactionKind.MONZO_PAID),
    ("monzotomonzo", TransactionKind.MONZO_TO_MONZO),
    ("directdebit", TransactionKind.DIRECT_DEBIT),
    ("standingorder", TransactionKind.STANDING_ORDER),
)

_AMOUNT_NOISE_RE = re.compile(r"[£$€\s,]")
_TYPE_NOISE_RE = re.compile(r"[\s\-_]")


@dataclass(frozen=True, slots=True)
class MonzoSheetRow:
    """One sheet row with named fields; every field is a string, never ``None``."""

    transaction_id: str = ""
    date: str = ""
    time: str = ""
    type: str = ""
    name: str = ""
    emoji: str = ""
    category: str = ""
    amount: str = ""
    currency: str = ""
    local_amount: str = ""
    local_currency: str = ""
    notes_and_tags: str = ""
    address: str = ""
    receipt: str = ""
    description: str = ""
    category_split: str = ""


_FIELD_ORDER: tuple[str, ...] = tuple(f.name for f in fields(MonzoSheetRow))


def decode_row(cells: Sequence[str | None]) -> MonzoSheetRow:
    """Map positional cells onto :class:`MonzoSheetRow` fields.

    Extra cells beyond column P are ignored; missing cells default to ``""``.
    """

    values: dict[str, str] = {}
    for pos, field_name in enumerate(_FIELD_ORDER):
        cell = cells[pos] if pos < len(cells) else None
        values[field_name] = "" if cell is None else str(cell)
    return MonzoSheetRow(**values)


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------


def _int_parts(text: str, sep: str, *, label: str, raw: str) -> list[int]:
    try:
        return [int(p) for p in text.split(sep)]
    except ValueError as exc:
        raise ValueError(f"invalid {label}: {raw!r}") from exc


def parse_monzo_datetime(date_text: str, time_text: str = "") -> datetime:
    """Combine ``DD/MM/YYYY`` and ``HH:MM:SS`` into a naive local ``datetime``.

    A blank time means midnight. Missing trailing time components (``"14:30"``)
    are taken as zero. Raises ``ValueError`` for non-numeric components or an
    impossible calendar date.
    """

    d = date_text.strip()
    parts = _int_parts(d, "/", label="DD/MM/YYYY date", raw=date_text)
    if len(parts) != 3:
        raise ValueError(f"invalid DD/MM/YYYY date: {date_text!r}")
    day, month, year = parts

    t = time_text.strip() or "00:00:00"
    tparts = _int_parts(t, ":", label="HH:MM:SS time", raw=time_text)
    if len(tparts) > 3:
        raise ValueError(f"invalid HH:MM:SS time: {time_text!r}")
    hours, minutes, seconds = (tparts + [0, 0, 0])[:3]

    try:
        return datetime(year, month, day, hours, minutes, seconds)
    except ValueError as exc:
        raise ValueError(f"invalid date/time {date_text!r} {time_text!r}: {exc}") from exc


def _parse_decimal(text: str) -> Decimal | None:
    cleaned = _AMOUNT_NOISE_RE.sub("", text or "")
    try:
        d = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not d.is_finite() or d.copy_abs() >= AMOUNT_LIMIT:
        return None
    if d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP).copy_abs() >= AMOUNT_LIMIT:
        return None
    return d


def parse_amount(text: str) -> Decimal:
    """Parse an amount cell such as ``"-£1,234.56"``.

    Unparseable text and amounts too large to store give ``0``.
    """

    d = _parse_decimal(text)
    return d if d is not None else Decimal("0")


def parse_transaction_type(type_text: str) -> TransactionKind:
    """Classify the sheet's "Type" cell (``"Card payment"`` → ``card_payment``)."""

    squashed = _TYPE_NOISE_RE.sub("", (type_text or "").lower())
    for keyword, kind in TYPE_KEYWORDS:
        if keyword in squashed:
            return kind
    return TransactionKind.OTHER


def _blank_to_none(value: str) -> str | None:
    s = value.strip()
    return s if s else None


def build_notes(notes_and_tags: str, address: str) -> str | None:
    """Join notes/tags and ``Location: <address>``; ``None`` when both are blank."""

    parts: list[str] = []
    notes = _blank_to_none(notes_and_tags)
    if notes:
        parts.append(notes)
    location = _blank_to_none(address)
    if location:
        parts.append(f"Location: {location}")
    return NOTES_SEPARATOR.join(parts) if parts else None


# ---------------------------------------------------------------------------
# Row → ParsedTransaction
# ---------------------------------------------------------------------------


def is_header_or_blank(row: MonzoSheetRow) -> bool:
    tx_id = row.transaction_id.strip()
    return not tx_id or tx_id == HEADER_TRANSACTION_ID or not row.date.strip()


def to_parsed_transaction(
    row: MonzoSheetRow, *, strict_amounts: bool = False
) -> ParsedTransaction | None:
    """Convert a decoded row into a :class:`ParsedTransaction`.

    Returns ``None`` for rows that are not transactions (blank id, the header
    label, or a blank date). Raises ``ValueError`` for a malformed date/time,
    and for an unparseable amount when ``strict_amounts`` is set.
    """

    if is_header_or_blank(row):
        return None

    external_id = row.transaction_id.strip()
    occurred_at = parse_monzo_datetime(row.date, row.time)

    amount = _parse_decimal(row.amount)
    if amount is None:
        if strict_amounts:
            raise ValueError(f"invalid amount: {row.amount!r}")
        logger.warning(
            "Unusable amount %r for transaction %s; recording 0", row.amount, external_id
        )
        amount = Decimal("0")

    merchant = _blank_to_none(row.name)
    description = merchant or _blank_to_none(row.description) or UNKNOWN_DESCRIPTION

    return ParsedTransaction(
        external_id=external_id,
        occurred_at=occurred_at,
        amount=amount,
        description=description,
        merchant=merchant,
        category=_blank_to_none(row.category) or DEFAULT_CATEGORY,
        notes=build_notes(row.notes_and_tags, row.address),
        kind=parse_transaction_type(row.type),
    )


__all__ = [
    "SHEET_COLUMNS",
    "HEADER_TRANSACTION_ID",
    "DEFAULT_CATEGORY",
    "UNKNOWN_DESCRIPTION",
    "AMOUNT_LIMIT",
    "TYPE_KEYWORDS",
    "MonzoSheetRow",
    "decode_row",
    "parse_monzo_datetime",
    "parse_amount",
    "parse_transaction_type",
    "build_notes",
    "is_header_or_blank",
    "to_parsed_transaction",
]
