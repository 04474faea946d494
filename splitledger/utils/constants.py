"""Constants used throughout the ledger."""

from enum import Enum


class SplitType(str, Enum):
    """How expense is split."""
    EQUAL = "equal"            # Split evenly among participants
    EXACT = "exact"            # Literal amount per participant
    PERCENTAGE = "percentage"  # Percent of total per participant


# Id prefixes
USER_ID_PREFIX = "U"
GROUP_ID_PREFIX = "group"
EXPENSE_ID_PREFIX = "expense"

# Notification templates
MSG_EXPENSE_ADDED = "New expense added: {description} ({currency} {amount}) paid by {payer}"
MSG_SETTLEMENT = "Settlement: {payer} paid {payee} {currency} {amount}"
MSG_DEBTS_SIMPLIFIED = "Debts have been simplified for group: {group}"
MSG_MEMBER_ADDED = "{name} added to group {group}"
MSG_MEMBER_LEFT = "{name} left group {group}"

# Error messages
ERR_AMOUNT_FORMAT = "Invalid amount format"
ERR_AMOUNT_NOT_FINITE = "Amount must be a finite number"
ERR_AMOUNT_NOT_POSITIVE = "Amount must be greater than zero"
ERR_AMOUNT_TOO_LARGE = "Amount is too large (maximum {maximum})"
ERR_EMPTY_DESCRIPTION = "Description cannot be empty"
ERR_EMPTY_NAME = "Name cannot be empty"
ERR_PERCENTAGE_FORMAT = "Invalid percentage format"
ERR_PERCENTAGE_RANGE = "Percentage must be between 0 and 100"
