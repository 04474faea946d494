"""Errors raised by the ledger and its services."""


class SplitLedgerError(Exception):
    """Base class for every ledger error."""


class ValidationError(SplitLedgerError, ValueError):
    """Rejected input. Nothing was posted."""


class InvalidAmountError(ValidationError):
    """Amount is non-positive, non-finite or unparseable."""


class NotAMemberError(ValidationError):
    """Operation references a user outside the group."""

    def __init__(self, user_id: str, group_id: str):
        super().__init__(f"user {user_id} is not a member of group {group_id}")
        self.user_id = user_id
        self.group_id = group_id


class OpenBalanceError(ValidationError):
    """Member cannot leave while holding a nonzero balance."""

    def __init__(self, user_id: str, group_id: str):
        super().__init__(
            f"user {user_id} cannot leave group {group_id} without clearing balances"
        )
        self.user_id = user_id
        self.group_id = group_id


class SplitMismatchError(ValidationError):
    """Computed shares disagree with the expense total."""


class InvalidSplitError(ValidationError):
    """Split input is malformed (no participants, missing or negative values)."""


class UnknownMemberError(SplitLedgerError, KeyError):
    """Ledger has no row for the requested owner."""

    def __init__(self, owner_id: str):
        super().__init__(owner_id)
        self.owner_id = owner_id

    def __str__(self) -> str:
        return f"unknown ledger owner: {self.owner_id}"


class GroupNotFoundError(SplitLedgerError, LookupError):
    """No group with that id."""


class UserNotFoundError(SplitLedgerError, LookupError):
    """No user with that id."""
