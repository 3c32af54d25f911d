"""Runtime settings for the import pipeline, read from the environment.

``DATABASE_URL`` is consumed by ``db.client`` directly; the values here only
tune import behavior. A local ``.env`` is loaded by the CLI before these are
read, so the same variables work from a shell or a dotenv file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_SHEET_NAME = "Personal Account Transactions"
DEFAULT_ACCOUNT_NAME = "Monzo Personal"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    raise ValueError(f"{name} must be one of 1/0/true/false/yes/no, got {raw!r}")


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


@dataclass(frozen=True, slots=True)
class ImportSettings:
    """Knobs for a sheet import.

    Attributes
    ----------
    strict_amounts:
        When ``True``, an amount cell that cannot be parsed fails the row
        (reported as a parse error). When ``False`` (default) the amount is
        taken as ``0`` and a warning is logged.
    account_name:
        Name given to the destination account when one has to be created.
    sheet_name:
        Default sheet name, used in the import log's source label.
    """

    strict_amounts: bool = False
    account_name: str = DEFAULT_ACCOUNT_NAME
    sheet_name: str = DEFAULT_SHEET_NAME

    @classmethod
    def from_env(cls) -> ImportSettings:
        """Build settings from ``FD_STRICT_AMOUNTS``, ``FD_ACCOUNT_NAME``, ``FD_SHEET_NAME``."""

        return cls(
            strict_amounts=_env_flag("FD_STRICT_AMOUNTS", False),
            account_name=_env_str("FD_ACCOUNT_NAME", DEFAULT_ACCOUNT_NAME),
            sheet_name=_env_str("FD_SHEET_NAME", DEFAULT_SHEET_NAME),
        )


__all__ = ["ImportSettings", "DEFAULT_SHEET_NAME", "DEFAULT_ACCOUNT_NAME"]
