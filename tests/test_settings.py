from __future__ import annotations

import pytest

from finance_dashboard.settings import DEFAULT_ACCOUNT_NAME, DEFAULT_SHEET_NAME, ImportSettings


def test_defaults_when_environment_is_empty():
    settings = ImportSettings.from_env()

    assert settings.strict_amounts is False
    assert settings.account_name == DEFAULT_ACCOUNT_NAME
    assert settings.sheet_name == DEFAULT_SHEET_NAME


def test_reads_overrides_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("FD_STRICT_AMOUNTS", "Yes")
    monkeypatch.setenv("FD_ACCOUNT_NAME", "  Joint  ")
    monkeypatch.setenv("FD_SHEET_NAME", "Joint Account Transactions")

    settings = ImportSettings.from_env()

    assert settings.strict_amounts is True
    assert settings.account_name == "Joint"
    assert settings.sheet_name == "Joint Account Transactions"


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("FD_STRICT_AMOUNTS", "")
    monkeypatch.setenv("FD_ACCOUNT_NAME", "   ")

    settings = ImportSettings.from_env()

    assert settings.strict_amounts is False
    assert settings.account_name == DEFAULT_ACCOUNT_NAME


def test_invalid_flag_is_rejected(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("FD_STRICT_AMOUNTS", "sometimes")

    with pytest.raises(ValueError, match="FD_STRICT_AMOUNTS"):
        ImportSettings.from_env()
