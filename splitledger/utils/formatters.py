"""Formatters for notification messages."""

from splitledger.models.expense import Expense, Settlement
from splitledger.utils.constants import MSG_EXPENSE_ADDED, MSG_SETTLEMENT


def format_expense_added(expense: Expense, payer_name: str, currency: str) -> str:
    return MSG_EXPENSE_ADDED.format(
        description=expense.description,
        currency=currency,
        amount=f"{expense.total_amount:.2f}",
        payer=payer_name,
    )


def format_settlement(settlement: Settlement, payer_name: str, payee_name: str, currency: str) -> str:
    return MSG_SETTLEMENT.format(
        payer=payer_name,
        payee=payee_name,
        currency=currency,
        amount=f"{settlement.amount:.2f}",
    )
