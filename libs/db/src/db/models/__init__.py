"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the personal-finance models used by ``finance_dashboard``.
"""

from .finance import Account, Base, Budget, Category, Debt, ImportLog, Transaction

__all__ = [
    "Base",
    "Account",
    "Budget",
    "Category",
    "Debt",
    "ImportLog",
    "Transaction",
]
