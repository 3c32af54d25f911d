# ruff: noqa: I001
"""Workflow orchestrator for importing a Monzo sheet grid.

Stages run strictly in order:

    parse → reconcile categories → resolve account → write → log → result

The public entry point never raises for pipeline failures. Any exception is
converted into a ``failed`` import log entry and an ``ImportResult`` with
``success=False``. Row- and record-level problems do not fail the import;
they are reported in ``ImportResult.errors`` next to the counts.

Sessions are owned by the caller. Each stage commits its own work so that a
later failure never undoes categories, the account or transaction batches
that were already written.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from os import PathLike
from pathlib import Path

from sqlalchemy.orm import Session

from ..accounts import ensure_monzo_account_exists
from ..categories import ensure_categories_exist
from ..ingest.parser import filter_by_date_range, parse_sheet_data
from ..ingest.utils import load_sheet_rows_from_csv
from ..logging_setup import get_logger
from ..models import DateRange, ImportResult, ImportRowError
from ..persistence import import_transactions, log_import
from ..settings import ImportSettings

logger = get_logger(__name__)

SOURCE_PREFIX = "monzo_sheets"


def source_label(sheet_name: str) -> str:
    return f"{SOURCE_PREFIX}:{sheet_name}"


def _record_failure(
    session: Session,
    *,
    user_id: uuid.UUID,
    source: str,
    message: str,
    file_name: str | None,
) -> None:
    session.rollback()
    try:
        log_import(
            session,
            user_id=user_id,
            source=source,
            records_processed=0,
            records_imported=0,
            status="failed",
            error_message=message,
            file_name=file_name,
        )
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Could not record failed import for user %s", user_id)


def import_from_sheet_data(
    session: Session,
    *,
    user_id: uuid.UUID,
    sheet_data: Sequence[Sequence[str | None]],
    sheet_name: str | None = None,
    date_range: DateRange | None = None,
    settings: ImportSettings | None = None,
    file_name: str | None = None,
) -> ImportResult:
    """Import a raw sheet grid (header row first) for ``user_id``.

    Parameters
    ----------
    session:
        Active SQLAlchemy session. Work is committed stage by stage.
    user_id:
        Owner of the categories, account and import log written here.
    sheet_data:
        Rows of cell strings in the Monzo sheet column order; row 0 is the
        header.
    sheet_name:
        Sheet name recorded in the log source (``monzo_sheets:<name>``).
        Defaults to ``settings.sheet_name``.
    date_range:
        Optional inclusive filter; rows outside it are neither imported nor
        counted as skipped.
    settings:
        Import settings; defaults to :meth:`ImportSettings.from_env`.
    file_name:
        Optional file name stored on the log entry (CSV imports).

    Returns
    -------
    ImportResult
        ``total_rows`` is the grid length minus the header. Parse errors
        carry their 1-indexed sheet row; write errors carry row ``0``.
    """

    total_rows = max(len(sheet_data) - 1, 0)
    errors: list[ImportRowError] = []
    source = source_label(sheet_name or "")

    try:
        cfg = settings or ImportSettings.from_env()
        source = source_label(sheet_name or cfg.sheet_name)

        parsed = parse_sheet_data(sheet_data, strict_amounts=cfg.strict_amounts)
        errors.extend(ImportRowError(row=e.row, message=e.message) for e in parsed.errors)
        transactions = filter_by_date_range(parsed.transactions, date_range)

        if not transactions:
            log_import(
                session,
                user_id=user_id,
                source=source,
                records_processed=0,
                records_imported=0,
                status="completed",
                file_name=file_name,
            )
            session.commit()
            return ImportResult(
                success=True, total_rows=total_rows, imported=0, skipped=0, errors=errors
            )

        category_map = ensure_categories_exist(
            session,
            user_id=user_id,
            monzo_categories=[t.category for t in transactions],
        )
        session.commit()

        account_id = ensure_monzo_account_exists(
            session, user_id=user_id, account_name=cfg.account_name
        )
        session.commit()

        written = import_transactions(
            session,
            account_id=account_id,
            transactions=transactions,
            category_map=category_map,
        )
        errors.extend(written.errors)

        log_import(
            session,
            user_id=user_id,
            source=source,
            records_processed=len(transactions),
            records_imported=written.imported,
            status="completed",
            file_name=file_name,
        )
        session.commit()

        logger.info(
            "Import %s for user %s: %d imported, %d skipped, %d errors",
            source,
            user_id,
            written.imported,
            written.skipped,
            len(errors),
        )
        return ImportResult(
            success=True,
            total_rows=total_rows,
            imported=written.imported,
            skipped=written.skipped,
            errors=errors,
        )
    except Exception as e:
        message = str(e) or e.__class__.__name__
        logger.exception("Import %s failed for user %s", source, user_id)
        _record_failure(
            session, user_id=user_id, source=source, message=message, file_name=file_name
        )
        return ImportResult(
            success=False,
            total_rows=total_rows,
            imported=0,
            skipped=0,
            errors=[ImportRowError(row=0, message=message)],
        )


def import_from_csv(
    session: Session,
    *,
    user_id: uuid.UUID,
    csv_path: str | PathLike[str],
    sheet_name: str | None = None,
    date_range: DateRange | None = None,
    settings: ImportSettings | None = None,
) -> ImportResult:
    """Load a CSV download of the sheet and run :func:`import_from_sheet_data`.

    File, encoding and header problems (``OSError``, ``UnicodeDecodeError``,
    ``csv.Error``) propagate to the
    caller; they happen before an import attempt exists.
    """

    rows = load_sheet_rows_from_csv(csv_path)
    return import_from_sheet_data(
        session,
        user_id=user_id,
        sheet_data=rows,
        sheet_name=sheet_name,
        date_range=date_range,
        settings=settings,
        file_name=Path(csv_path).name,
    )


__all__ = ["SOURCE_PREFIX", "source_label", "import_from_sheet_data", "import_from_csv"]
