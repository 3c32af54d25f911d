from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

import pytest

from finance_dashboard.ingest.adapters.monzo_sheet import (
    MonzoSheetRow,
    build_notes,
    decode_row,
    parse_amount,
    parse_monzo_datetime,
    parse_transaction_type,
    to_parsed_transaction,
)
from finance_dashboard.models import TransactionKind


def _row(**overrides: str) -> MonzoSheetRow:
    base = {
        "transaction_id": "tx_0001",
        "date": "15/03/2024",
        "time": "14:30:45",
        "type": "Card payment",
        "name": "Tesco",
        "category": "Groceries",
        "amount": "-£45.82",
        "currency": "GBP",
    }
    base.update(overrides)
    return MonzoSheetRow(**base)


# ---- decode_row ---------------------------------------------------------------


def test_decode_row_maps_positions_and_defaults_missing_cells():
    row = decode_row(["tx_1", "01/02/2024", None, "Card payment", "Pret"])

    assert row.transaction_id == "tx_1"
    assert row.date == "01/02/2024"
    assert row.time == ""
    assert row.type == "Card payment"
    assert row.name == "Pret"
    assert row.category == ""
    assert row.category_split == ""


def test_decode_row_reads_all_sixteen_columns_and_ignores_extras():
    cells = [f"c{i}" for i in range(18)]
    row = decode_row(cells)

    assert row.transaction_id == "c0"
    assert row.amount == "c7"
    assert row.notes_and_tags == "c11"
    assert row.address == "c12"
    assert row.description == "c14"
    assert row.category_split == "c15"


def test_decode_row_empty_input_gives_blank_row():
    assert decode_row([]) == MonzoSheetRow()


# ---- dates and times ------------------------------------------------------------


def test_parse_monzo_datetime_combines_date_and_time():
    assert parse_monzo_datetime("15/03/2024", "14:30:45") == datetime(2024, 3, 15, 14, 30, 45)


def test_parse_monzo_datetime_blank_time_is_midnight():
    assert parse_monzo_datetime("01/12/2023", "") == datetime(2023, 12, 1, 0, 0, 0)


def test_parse_monzo_datetime_pads_missing_time_parts():
    assert parse_monzo_datetime("01/12/2023", "09:05") == datetime(2023, 12, 1, 9, 5, 0)


@pytest.mark.parametrize(
    "date_text,time_text",
    [
        ("not-a-date", ""),
        ("2024-03-15", ""),
        ("31/02/2024", ""),
        ("15/03/2024", "aa:bb:cc"),
        ("15/03/2024", "25:00:00"),
    ],
)
def test_parse_monzo_datetime_rejects_malformed_input(date_text: str, time_text: str):
    with pytest.raises(ValueError):
        parse_monzo_datetime(date_text, time_text)


# ---- amounts --------------------------------------------------------------------


@pytest.mark.parametrize(
    "text,expected",
    [
        ("£45.82", Decimal("45.82")),
        ("-£45.82", Decimal("-45.82")),
        ("1,234.56", Decimal("1234.56")),
        (" -12 ", Decimal("-12")),
        ("abc", Decimal("0")),
        ("", Decimal("0")),
        ("9,999,999,999.99", Decimal("9999999999.99")),
        ("1e30", Decimal("0")),
        ("-£12345678901.00", Decimal("0")),
        ("9999999999.995", Decimal("0")),
    ],
)
def test_parse_amount(text: str, expected: Decimal):
    assert parse_amount(text) == expected


# ---- transaction type --------------------------------------------------------------


@pytest.mark.parametrize(
    "text,kind",
    [
        ("Card payment", TransactionKind.CARD_PAYMENT),
        ("card_payment", TransactionKind.CARD_PAYMENT),
        ("Pot transfer", TransactionKind.POT_TRANSFER),
        ("Faster payment", TransactionKind.FASTER_PAYMENT),
        ("Monzo Paid", TransactionKind.MONZO_PAID),
        ("Monzo-to-Monzo", TransactionKind.MONZO_TO_MONZO),
        ("Direct Debit", TransactionKind.DIRECT_DEBIT),
        ("Standing order", TransactionKind.STANDING_ORDER),
        ("Bacs (Direct Credit)", TransactionKind.OTHER),
        ("", TransactionKind.OTHER),
    ],
)
def test_parse_transaction_type(text: str, kind: TransactionKind):
    assert parse_transaction_type(text) is kind


# ---- notes ---------------------------------------------------------------------------


def test_build_notes_joins_notes_and_location():
    assert build_notes("#lunch", "1 High St") == "#lunch | Location: 1 High St"
    assert build_notes("", "1 High St") == "Location: 1 High St"
    assert build_notes("#lunch", "  ") == "#lunch"
    assert build_notes("", "") is None


# ---- to_parsed_transaction --------------------------------------------------------------


def test_to_parsed_transaction_builds_canonical_record():
    tx = to_parsed_transaction(_row(notes_and_tags="weekly shop", address="Oxford Rd"))

    assert tx is not None
    assert tx.external_id == "tx_0001"
    assert tx.occurred_at == datetime(2024, 3, 15, 14, 30, 45)
    assert tx.amount == Decimal("-45.82")
    assert tx.merchant == "Tesco"
    assert tx.description == "Tesco"
    assert tx.category == "Groceries"
    assert tx.notes == "weekly shop | Location: Oxford Rd"
    assert tx.kind is TransactionKind.CARD_PAYMENT


def test_description_falls_back_to_sheet_description_then_placeholder():
    tx = to_parsed_transaction(_row(name="", description="TFL TRAVEL CH"))
    assert tx is not None
    assert tx.merchant is None
    assert tx.description == "TFL TRAVEL CH"

    tx = to_parsed_transaction(_row(name=" ", description=""))
    assert tx is not None
    assert tx.description == "Unknown transaction"


def test_blank_category_defaults_to_general():
    tx = to_parsed_transaction(_row(category=""))
    assert tx is not None
    assert tx.category == "General"


@pytest.mark.parametrize(
    "overrides",
    [
        {"transaction_id": ""},
        {"transaction_id": "Transaction ID"},
        {"date": ""},
    ],
)
def test_header_and_blank_rows_are_not_transactions(overrides: dict[str, str]):
    assert to_parsed_transaction(_row(**overrides)) is None


def test_malformed_date_raises():
    with pytest.raises(ValueError):
        to_parsed_transaction(_row(date="yesterday"))


def test_unparseable_amount_is_zero_with_warning(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING, logger="finance_dashboard"):
        tx = to_parsed_transaction(_row(amount="n/a"))

    assert tx is not None
    assert tx.amount == Decimal("0")
    assert "tx_0001" in caplog.text


def test_unparseable_amount_raises_when_strict():
    with pytest.raises(ValueError, match="invalid amount"):
        to_parsed_transaction(_row(amount="n/a"), strict_amounts=True)


def test_out_of_range_amount_is_a_row_error_when_strict():
    with pytest.raises(ValueError, match="invalid amount"):
        to_parsed_transaction(_row(amount="1e30"), strict_amounts=True)
