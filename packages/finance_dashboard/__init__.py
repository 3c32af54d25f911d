"""Public interface for the ``finance_dashboard`` package.

Symbol re-exports only: the import API and the public models/types.
"""

from .api import (
    decode_row,
    import_from_csv,
    import_from_sheet_data,
    list_import_logs,
    parse_sheet_data,
    to_parsed_transaction,
)
from .models import (
    DateRange,
    ImportResult,
    ImportRowError,
    ParsedSheet,
    ParsedTransaction,
    ParseError,
    TransactionKind,
)
from .settings import ImportSettings

__all__ = [
    # API
    "decode_row",
    "to_parsed_transaction",
    "parse_sheet_data",
    "import_from_sheet_data",
    "import_from_csv",
    "list_import_logs",
    # Models / types
    "DateRange",
    "ImportResult",
    "ImportRowError",
    "ImportSettings",
    "ParsedSheet",
    "ParsedTransaction",
    "ParseError",
    "TransactionKind",
]
