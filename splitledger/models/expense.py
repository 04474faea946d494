from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from splitledger.utils.constants import SplitType


class Split(BaseModel):
    """One participant's share of an expense."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    amount: Decimal

    def __repr__(self) -> str:
        return f"<Split(user_id={self.user_id}, amount={self.amount})>"


class Expense(BaseModel):
    """Expense entry; frozen once posted."""

    model_config = ConfigDict(frozen=True)

    expense_id: str
    description: str
    total_amount: Decimal
    payer_id: str
    split_type: SplitType
    splits: Tuple[Split, ...]
    group_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def split_total(self) -> Decimal:
        return sum((s.amount for s in self.splits), Decimal("0"))

    def share_of(self, user_id: str) -> Decimal:
        return sum((s.amount for s in self.splits if s.user_id == user_id), Decimal("0"))

    def __repr__(self) -> str:
        return (
            f"<Expense(id={self.expense_id}, amount={self.total_amount}, "
            f"description='{self.description}')>"
        )


class Settlement(BaseModel):
    """Record of a payment that paid down a balance."""

    model_config = ConfigDict(frozen=True)

    payer_id: str
    payee_id: str
    amount: Decimal
    group_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"<Settlement(payer={self.payer_id}, payee={self.payee_id}, amount={self.amount})>"


class Transfer(BaseModel):
    """Suggested payment produced by debt simplification."""

    model_config = ConfigDict(frozen=True)

    debtor_id: str
    creditor_id: str
    amount: Decimal


class BalanceSummary(BaseModel):
    """Totals for one user on a ledger."""

    user_id: str
    total_owed: Decimal
    total_owing: Decimal
    balances: Dict[str, Decimal]
