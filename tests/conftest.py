"""Pytest configuration for test isolation.

``db.client`` keeps one process-wide engine bound to the first URL it sees.
Each test bootstraps its own SQLite file, so the shared engine is disposed
around every test. Import settings are read from ``FD_*`` environment
variables; those are cleared so a developer's shell or ``.env`` cannot change
test outcomes.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from pathlib import Path

import pytest
from db.client import dispose_engine

from tests.helpers.db import bootstrap_sqlite_db

_ENV_VARS = (
    "DATABASE_URL",
    "FD_STRICT_AMOUNTS",
    "FD_ACCOUNT_NAME",
    "FD_SHEET_NAME",
    "FINANCE_DASHBOARD_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env_and_engine(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    dispose_engine()
    yield
    dispose_engine()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return bootstrap_sqlite_db(tmp_path / "fd-test.db")


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()
