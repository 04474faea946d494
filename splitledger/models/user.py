from typing import Dict, Optional
from decimal import Decimal

from splitledger.models.ledger import BalanceLedger


class User:
    """A person who can pay, owe and belong to groups."""

    def __init__(self, user_id: str, name: str, direct_ledger: BalanceLedger, email: Optional[str] = None):
        self.user_id = user_id
        self.name = name
        self.email = email
        self._direct_ledger = direct_ledger
        direct_ledger.add_owner(user_id)

    @property
    def balances(self) -> Dict[str, Decimal]:
        """Direct (non-group) balances; positive means they owe this user."""
        return self._direct_ledger.balances_of(self.user_id)

    def total_owed(self) -> Decimal:
        """What this user owes others directly."""
        return self._direct_ledger.total_owed_by(self.user_id)

    def total_owing(self) -> Decimal:
        """What others owe this user directly."""
        return self._direct_ledger.total_owed_to(self.user_id)

    def __repr__(self) -> str:
        return f"<User(id={self.user_id}, name='{self.name}')>"

    def __hash__(self) -> int:
        return hash(self.user_id)

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.user_id == other.user_id
