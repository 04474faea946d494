import copy
from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from splitledger.exceptions import UnknownMemberError
from splitledger.utils.validators import CENT, Number, round2, to_decimal

Balances = Dict[str, Dict[str, Decimal]]


class BalanceLedger:
    """
    Pairwise signed balances for one scope (a group or the direct ledger).

    ``ledger[a][b] > 0`` means b owes a. Every post keeps
    ``ledger[a][b] == -ledger[b][a]``; entries within tolerance of zero are
    removed rather than stored.
    """

    def __init__(self, tolerance: Decimal = CENT, auto_register: bool = False):
        self.tolerance = tolerance
        self.auto_register = auto_register
        self._rows: Balances = {}

    def __contains__(self, owner_id: str) -> bool:
        return owner_id in self._rows

    def __iter__(self) -> Iterator[str]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"<BalanceLedger(owners={len(self._rows)}, edges={self.edge_count()})>"

    # ===== Rows =====

    def owners(self) -> List[str]:
        return list(self._rows)

    def add_owner(self, owner_id: str) -> None:
        self._rows.setdefault(owner_id, {})

    def remove_owner(self, owner_id: str) -> None:
        """Drop the owner's row and every reference to it."""
        self._require(owner_id)
        del self._rows[owner_id]
        for row in self._rows.values():
            row.pop(owner_id, None)

    # ===== Mutation =====

    def post(self, creditor_id: str, debtor_id: str, amount: Number) -> None:
        """
        Record that debtor owes creditor ``amount`` more.

        A negative amount moves credit the other way; a settlement is
        ``post(payer, payee, paid)``.
        """
        if creditor_id == debtor_id:
            return

        amount = round2(to_decimal(amount))

        for owner_id in (creditor_id, debtor_id):
            if owner_id not in self._rows:
                if not self.auto_register:
                    raise UnknownMemberError(owner_id)
                self.add_owner(owner_id)

        creditor_row = self._rows[creditor_id]
        debtor_row = self._rows[debtor_id]

        new_value = creditor_row.get(debtor_id, Decimal("0")) + amount

        if abs(new_value) < self.tolerance:
            creditor_row.pop(debtor_id, None)
            debtor_row.pop(creditor_id, None)
        else:
            creditor_row[debtor_id] = new_value
            debtor_row[creditor_id] = -new_value

    # ===== Queries =====

    def balances_of(self, owner_id: str) -> Dict[str, Decimal]:
        return dict(self._require(owner_id))

    def balance_between(self, owner_id: str, other_id: str) -> Decimal:
        return self._require(owner_id).get(other_id, Decimal("0"))

    def is_settled(self, owner_id: str) -> bool:
        return all(abs(v) <= self.tolerance for v in self._require(owner_id).values())

    def net_amount(self, owner_id: str) -> Decimal:
        """Owed to the owner minus owed by the owner."""
        return sum(self._require(owner_id).values(), Decimal("0"))

    def net_amounts(self) -> Dict[str, Decimal]:
        """
        Net position of every owner.

        Only positive entries are read so each pair contributes once.
        """
        net = {owner_id: Decimal("0") for owner_id in self._rows}
        for creditor_id, row in self._rows.items():
            for debtor_id, amount in row.items():
                if amount > 0:
                    net[creditor_id] += amount
                    net[debtor_id] -= amount
        return net

    def total_owed_to(self, owner_id: str) -> Decimal:
        """What others owe the owner."""
        return sum((v for v in self._require(owner_id).values() if v > 0), Decimal("0"))

    def total_owed_by(self, owner_id: str) -> Decimal:
        """What the owner owes others."""
        return sum((-v for v in self._require(owner_id).values() if v < 0), Decimal("0"))

    def edge_count(self) -> int:
        """Number of unordered pairs holding a nonzero balance."""
        return sum(1 for row in self._rows.values() for v in row.values() if v > 0)

    def snapshot(self) -> Balances:
        return copy.deepcopy(self._rows)

    def copy(self) -> "BalanceLedger":
        clone = BalanceLedger(self.tolerance, self.auto_register)
        clone._rows = self.snapshot()
        return clone

    @classmethod
    def from_balances(
            cls,
            balances: Balances,
            tolerance: Decimal = CENT,
            owners: Optional[List[str]] = None
    ) -> "BalanceLedger":
        """
        Build a ledger from ``{creditor: {debtor: amount}}``.

        Only positive entries are read, so a ``snapshot()`` round-trips and
        the mirrored negative side may be omitted.
        """
        ledger = cls(tolerance, auto_register=True)
        for owner_id in owners or []:
            ledger.add_owner(owner_id)
        for creditor_id, row in balances.items():
            ledger.add_owner(creditor_id)
            for debtor_id, amount in row.items():
                if to_decimal(amount) > 0:
                    ledger.post(creditor_id, debtor_id, amount)
        ledger.auto_register = False
        return ledger

    def _require(self, owner_id: str) -> Dict[str, Decimal]:
        try:
            return self._rows[owner_id]
        except KeyError:
            raise UnknownMemberError(owner_id) from None
