"""Ledger domain models."""

from splitledger.models.ledger import BalanceLedger
from splitledger.models.expense import BalanceSummary, Expense, Settlement, Split, Transfer
from splitledger.models.user import User

__all__ = [
    "BalanceLedger",
    "BalanceSummary",
    "Expense",
    "Settlement",
    "Split",
    "Transfer",
    "User",
]
