"""Validators for amounts, percentages and names."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Tuple, Union

from splitledger.utils.constants import (
    ERR_AMOUNT_FORMAT,
    ERR_AMOUNT_NOT_FINITE,
    ERR_AMOUNT_NOT_POSITIVE,
    ERR_AMOUNT_TOO_LARGE,
    ERR_EMPTY_DESCRIPTION,
    ERR_EMPTY_NAME,
    ERR_PERCENTAGE_FORMAT,
    ERR_PERCENTAGE_RANGE,
)

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal without float artifacts.

    Raises:
        InvalidOperation: value cannot be parsed
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"not a number: {value!r}")
    if isinstance(value, str):
        value = value.strip().replace(" ", "").replace(",", ".")
    return Decimal(str(value))


def round2(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def validate_amount(
        value: Number,
        max_amount: Optional[Decimal] = None
) -> Tuple[bool, Optional[Decimal], Optional[str]]:
    """
    Validate and parse a monetary amount.

    Args:
        value: Decimal, int, float or text
        max_amount: Optional upper bound

    Returns:
        Tuple of (is_valid, amount, error_message)
    """
    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return False, None, ERR_AMOUNT_FORMAT

    if not amount.is_finite():
        return False, None, ERR_AMOUNT_NOT_FINITE

    # Round to 2 decimal places
    amount = round2(amount)

    if amount <= 0:
        return False, None, ERR_AMOUNT_NOT_POSITIVE

    if max_amount is not None and amount > max_amount:
        return False, None, ERR_AMOUNT_TOO_LARGE.format(maximum=max_amount)

    return True, amount, None


def validate_percentage(value: Number) -> Tuple[bool, Optional[Decimal], Optional[str]]:
    """
    Validate and parse percentage.

    Returns:
        Tuple of (is_valid, percentage, error_message)
    """
    if isinstance(value, str):
        value = value.replace("%", "")

    try:
        percentage = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return False, None, ERR_PERCENTAGE_FORMAT

    if not percentage.is_finite():
        return False, None, ERR_PERCENTAGE_FORMAT

    if percentage < 0 or percentage > 100:
        return False, None, ERR_PERCENTAGE_RANGE

    return True, percentage, None


def validate_description(description: str) -> Tuple[bool, Optional[str]]:
    """
    Validate expense description.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not description or not description.strip():
        return False, ERR_EMPTY_DESCRIPTION

    return True, None


def validate_name(name: str) -> Tuple[bool, Optional[str]]:
    """Validate user or group name."""
    if not name or not name.strip():
        return False, ERR_EMPTY_NAME

    return True, None
