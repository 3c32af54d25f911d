from __future__ import annotations

import json
import uuid
from pathlib import Path

import pytest
from typer.testing import CliRunner

import finance_dashboard.cli as cli_mod
from finance_dashboard.cli import app

SAMPLE_CSV = Path(__file__).resolve().parent / "data/monzo_sample.csv"

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep log lines out of captured stdout; handlers outlive a single runner.
    monkeypatch.setattr(cli_mod, "configure_logging", lambda: None)


def test_import_csv_prints_wire_result(db_url: str, user_id: uuid.UUID):
    result = runner.invoke(
        app,
        [
            "import-csv",
            "--csv-path",
            str(SAMPLE_CSV),
            "--user-id",
            str(user_id),
            "--database-url",
            db_url,
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["success"] is True
    assert payload["totalRows"] == 5
    assert payload["imported"] == 4
    assert payload["errors"][0]["row"] == 6


def test_import_csv_honours_date_window(db_url: str, user_id: uuid.UUID):
    result = runner.invoke(
        app,
        [
            "import-csv",
            "--csv-path",
            str(SAMPLE_CSV),
            "--user-id",
            str(user_id),
            "--database-url",
            db_url,
            "--start-date",
            "2024-04-03",
            "--end-date",
            "2024-04-03",
        ],
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["imported"] == 2


def test_import_csv_missing_file_exits_nonzero(tmp_path: Path, db_url: str, user_id: uuid.UUID):
    result = runner.invoke(
        app,
        [
            "import-csv",
            "--csv-path",
            str(tmp_path / "nope.csv"),
            "--user-id",
            str(user_id),
            "--database-url",
            db_url,
        ],
    )

    assert result.exit_code == 1


def test_import_csv_rejects_non_monzo_header(tmp_path: Path, db_url: str, user_id: uuid.UUID):
    bad = tmp_path / "amex.csv"
    bad.write_text("Date,Description,Amount\n01/02/2024,Coffee,3.20\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["import-csv", "--csv-path", str(bad), "--user-id", str(user_id), "--database-url", db_url],
    )

    assert result.exit_code == 1


def test_import_history_lists_entries(db_url: str, user_id: uuid.UUID):
    empty = runner.invoke(
        app, ["import-history", "--user-id", str(user_id), "--database-url", db_url]
    )
    assert empty.exit_code == 0, empty.output
    assert "No imports recorded." in empty.stdout

    imported = runner.invoke(
        app,
        [
            "import-csv",
            "--csv-path",
            str(SAMPLE_CSV),
            "--user-id",
            str(user_id),
            "--database-url",
            db_url,
            "--sheet-name",
            "Personal",
        ],
    )
    assert imported.exit_code == 0, imported.output

    history = runner.invoke(
        app, ["import-history", "--user-id", str(user_id), "--database-url", db_url]
    )
    assert history.exit_code == 0, history.output
    (line,) = history.stdout.strip().splitlines()
    fields = line.split("\t")
    assert fields[1:5] == ["monzo_sheets:Personal", "completed", "4", "4"]


def test_import_csv_rejects_non_utf8_file(tmp_path: Path, db_url: str, user_id: uuid.UUID):
    latin1 = tmp_path / "latin1.csv"
    latin1.write_bytes(b"Transaction ID,Date\ntx_1,01/02/2024,Caf\xe9 \xa3\n")

    result = runner.invoke(
        app,
        ["import-csv", "--csv-path", str(latin1), "--user-id", str(user_id), "--database-url", db_url],
    )

    assert result.exit_code == 1
    assert not isinstance(result.exception, UnicodeDecodeError)
    assert "CSV is not UTF-8" in result.output
