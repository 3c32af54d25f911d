"""Ingest utilities shared by CLI commands and workflows.

Exposes a helper that loads a CSV download of the Monzo sheet as the raw grid
(list of rows of cell strings) expected by
:func:`finance_dashboard.ingest.parser.parse_sheet_data`.
"""

from __future__ import annotations

import csv
from os import PathLike
from pathlib import Path

from .adapters.monzo_sheet import HEADER_TRANSACTION_ID, SHEET_COLUMNS


def load_sheet_rows_from_csv(csv_path: str | PathLike[str]) -> list[list[str]]:
    """Read a Monzo sheet CSV export and return every row, header included.

    The header is validated loosely: the first cell must be the
    ``Transaction ID`` label. Column positions after that follow the sheet
    contract (:data:`SHEET_COLUMNS`); rows are returned as-is.

    Raises ``csv.Error`` when the file is empty or the header is not a Monzo
    sheet header.
    """

    p = Path(csv_path)
    with p.open(encoding="utf-8-sig", newline="") as f:
        rows = [list(r) for r in csv.reader(f)]

    if not rows:
        raise csv.Error(f"CSV appears to be empty: {csv_path}")
    header = rows[0]
    if not header or header[0].strip() != HEADER_TRANSACTION_ID:
        raise csv.Error(
            "CSV header mismatch for the Monzo sheet export. Expected columns: "
            + ", ".join(SHEET_COLUMNS)
        )
    return rows


__all__ = ["load_sheet_rows_from_csv"]
