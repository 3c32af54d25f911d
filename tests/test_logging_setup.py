from __future__ import annotations

import io
import logging

import pytest

import finance_dashboard.logging_setup as logging_setup
from finance_dashboard.ingest.parser import parse_sheet_data


@pytest.fixture
def pkg_logger(monkeypatch: pytest.MonkeyPatch):
    logger = logging.getLogger("finance_dashboard")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    monkeypatch.setattr(logging_setup, "_configured", False)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_configure_logging_uses_env_level_and_single_handler(
    pkg_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setenv("FINANCE_DASHBOARD_LOG_LEVEL", "warning")
    stream = io.StringIO()

    logging_setup.configure_logging(stream=stream)
    logging_setup.configure_logging(stream=io.StringIO())

    stream_handlers = [h for h in pkg_logger.handlers if isinstance(h, logging.StreamHandler)]
    assert len(stream_handlers) == 1
    assert pkg_logger.level == logging.WARNING

    parse_sheet_data([["Transaction ID"], ["tx_1", "not a date"]])
    output = stream.getvalue()
    assert "Skipping sheet row 2" in output
    # INFO parse summary is below the configured level
    assert "Parsed 1 data rows" not in output


def test_explicit_level_wins_over_environment(
    pkg_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setenv("FINANCE_DASHBOARD_LOG_LEVEL", "ERROR")

    logging_setup.configure_logging("DEBUG", stream=io.StringIO())

    assert pkg_logger.level == logging.DEBUG


@pytest.mark.parametrize(
    "raw,expected",
    [("debug", logging.DEBUG), (" Warning ", logging.WARNING), ("15", 15), ("chatty", logging.INFO)],
)
def test_resolve_level_accepts_names_and_numbers(raw: str, expected: int):
    assert logging_setup.resolve_level(raw) == expected
