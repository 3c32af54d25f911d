"""Public API for the ``finance_dashboard`` package.

The import entry points live in :mod:`finance_dashboard.workflows.sheet_import`
and are re-exported here so callers (CLI, web handlers) depend on one stable
module. Parsing helpers are exposed for callers that only need the pure
row → transaction step without touching the database.
"""

from __future__ import annotations

from .ingest.adapters.monzo_sheet import decode_row, to_parsed_transaction
from .ingest.parser import parse_sheet_data
from .persistence import list_import_logs
from .workflows.sheet_import import import_from_csv, import_from_sheet_data

__all__ = [
    "decode_row",
    "to_parsed_transaction",
    "parse_sheet_data",
    "import_from_sheet_data",
    "import_from_csv",
    "list_import_logs",
]
