# ruff: noqa: I001
"""CLI for the ``finance_dashboard`` package.

Typer-based console interface over :mod:`finance_dashboard.api`. Environment
variables (notably ``DATABASE_URL``) are loaded from a local ``.env`` using
``python-dotenv`` before any command runs; command options override them.
"""

from __future__ import annotations

import json
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from .logging_setup import configure_logging, get_logger
from .models import DateRange

logger = get_logger(__name__)

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Import Monzo sheet exports into the personal finance dashboard database.",
)

_DATE_FORMATS = ["%Y-%m-%d"]


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    raise typer.Exit(1)


@app.command("import-csv")
def import_csv_cmd(
    csv_path: Annotated[
        Path,
        typer.Option(
            "--csv-path",
            help="Path to a CSV download of the Monzo transactions sheet",
            dir_okay=False,
            file_okay=True,
        ),
    ],
    user_id: Annotated[uuid.UUID, typer.Option(help="Owner of the imported data.")],
    sheet_name: Annotated[
        str | None,
        typer.Option(help="Sheet name recorded in the import log (env FD_SHEET_NAME)."),
    ] = None,
    database_url: Annotated[
        str | None, typer.Option(help="Override DATABASE_URL (falls back to env var).")
    ] = None,
    start_date: Annotated[
        datetime | None,
        typer.Option(formats=_DATE_FORMATS, help="Only import rows on/after this date."),
    ] = None,
    end_date: Annotated[
        datetime | None,
        typer.Option(formats=_DATE_FORMATS, help="Only import rows on/before this date."),
    ] = None,
) -> None:
    """Import a sheet CSV and print the result summary as JSON."""

    import csv

    # Deferred imports keep `--help` fast and free of DB side effects
    from db.client import session_scope
    from .ingest.utils import load_sheet_rows_from_csv
    from .settings import ImportSettings
    from .workflows.sheet_import import import_from_sheet_data

    try:
        date_range = DateRange(
            start=start_date.date() if start_date else None,
            end=end_date.date() if end_date else None,
        )
        settings = ImportSettings.from_env()
    except ValueError as e:
        _fail(str(e))

    try:
        rows = load_sheet_rows_from_csv(csv_path)
    except FileNotFoundError:
        _fail(f"File not found: {csv_path}")
    except PermissionError:
        _fail(f"Permission denied: {csv_path}")
    except csv.Error as e:
        _fail(f"Failed to parse CSV: {e}")
    except UnicodeDecodeError as e:
        _fail(f"CSV is not UTF-8: {e}")

    try:
        with session_scope(database_url=database_url) as session:
            result = import_from_sheet_data(
                session,
                user_id=user_id,
                sheet_data=rows,
                sheet_name=sheet_name,
                date_range=date_range,
                settings=settings,
                file_name=csv_path.name,
            )
    except RuntimeError as e:
        _fail(str(e))

    typer.echo(json.dumps(result.to_wire(), indent=2))
    if not result.success:
        raise typer.Exit(1)


@app.command("import-history")
def import_history_cmd(
    user_id: Annotated[uuid.UUID, typer.Option(help="Owner whose imports to list.")],
    limit: Annotated[int, typer.Option(min=1, help="Maximum entries to show.")] = 20,
    database_url: Annotated[
        str | None, typer.Option(help="Override DATABASE_URL (falls back to env var).")
    ] = None,
) -> None:
    """Print recent import log entries, newest first (tab-separated)."""

    from db.client import session_scope
    from .persistence import list_import_logs

    try:
        with session_scope(database_url=database_url) as session:
            entries = list_import_logs(session, user_id=user_id, limit=limit)
            lines = [
                "\t".join(
                    [
                        e.completed_at.isoformat() if e.completed_at else "",
                        e.source,
                        e.status,
                        str(e.records_processed),
                        str(e.records_imported),
                        e.error_message or "",
                    ]
                )
                for e in entries
            ]
    except (RuntimeError, SQLAlchemyError) as e:
        _fail(str(e))

    if not lines:
        typer.echo("No imports recorded.")
        return
    for line in lines:
        typer.echo(line)


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging."""

    # override=False keeps variables already set in the environment
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    app()
