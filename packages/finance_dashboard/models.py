"""Data models for the Monzo sheet import pipeline.

Internal records (decoded sheet rows, parsed transactions, parse errors) are
frozen dataclasses: they are produced by pure functions and never mutated.
The caller-facing import summary is a pydantic model so it serializes to the
camelCase wire shape consumed by the dashboard:

.. code-block:: json

    {"success": true, "totalRows": 3, "imported": 2, "skipped": 0,
     "errors": [{"row": 4, "message": "..."}]}
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Parsed transactions
# ---------------------------------------------------------------------------


class TransactionKind(StrEnum):
    """Monzo transaction type, classified from the sheet's "Type" column."""

    CARD_PAYMENT = "card_payment"
    POT_TRANSFER = "pot_transfer"
    FASTER_PAYMENT = "faster_payment"
    MONZO_PAID = "monzo_paid"
    MONZO_TO_MONZO = "monzo_to_monzo"
    DIRECT_DEBIT = "direct_debit"
    STANDING_ORDER = "standing_order"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class ParsedTransaction:
    """A canonical transaction parsed from one sheet row.

    Attributes
    ----------
    external_id:
        Monzo transaction id (``tx_...``). Unique per source; used as the
        dedup key across imports.
    occurred_at:
        Naive local date-time combining the sheet's date and time cells.
    amount:
        Signed amount; positive is money in, negative is money out.
    description:
        Merchant name, else the sheet description, else a placeholder.
    merchant:
        Raw merchant name, ``None`` when the cell is blank.
    category:
        External (Monzo) category label; ``"General"`` when blank.
    notes:
        Notes/tags and address joined with ``" | "``; ``None`` when both
        are blank.
    kind:
        Classified transaction type.
    """

    external_id: str
    occurred_at: datetime
    amount: Decimal
    description: str
    merchant: str | None
    category: str
    notes: str | None
    kind: TransactionKind


@dataclass(frozen=True, slots=True)
class ParseError:
    """A row that could not be parsed; ``row`` is 1-indexed, header is row 1."""

    row: int
    message: str


@dataclass(frozen=True, slots=True)
class ParsedSheet:
    """Output of the batch parser: valid transactions plus per-row errors."""

    transactions: Sequence[ParsedTransaction]
    errors: Sequence[ParseError]


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive date bounds; either side may be open (``None``)."""

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("DateRange start must not be after end")


# ---------------------------------------------------------------------------
# Import summary (caller-facing)
# ---------------------------------------------------------------------------


class ImportRowError(BaseModel):
    """A row- or record-level problem reported in :class:`ImportResult`.

    ``row`` is the 1-indexed sheet row for parse errors and ``0`` for errors
    raised while writing, where the sheet position is no longer known.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    row: int
    transaction_id: str | None = Field(default=None, alias="transactionId")
    message: str


class ImportResult(BaseModel):
    """Outcome of one import invocation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: bool
    total_rows: int = Field(alias="totalRows")
    imported: int
    skipped: int
    errors: list[ImportRowError] = Field(default_factory=list)

    def to_wire(self) -> dict[str, object]:
        """Return the camelCase mapping used by API responses and the CLI."""

        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True, slots=True)
class WriteSummary:
    """Counts and errors produced by the import writer."""

    imported: int
    skipped: int
    errors: Sequence[ImportRowError]


__all__ = [
    "TransactionKind",
    "ParsedTransaction",
    "ParseError",
    "ParsedSheet",
    "DateRange",
    "ImportRowError",
    "ImportResult",
    "WriteSummary",
]
