"""Service for collapsing pairwise debts into a minimal set of transfers."""

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from splitledger.models.expense import Transfer
from splitledger.models.ledger import BalanceLedger
from splitledger.utils.validators import round2

logger = logging.getLogger(__name__)


class DebtSimplifier:
    """Greedy min-cash-flow over a ledger's net positions."""

    def __init__(self, tolerance: Optional[Decimal] = None):
        self.tolerance = tolerance

    def simplify(self, ledger: BalanceLedger) -> BalanceLedger:
        """
        Build an equivalent ledger with as few edges as the greedy pass finds.

        Every owner of the input keeps a (possibly empty) row, and each
        owner's net amount is unchanged. The input is not modified. When the
        greedy plan would need more edges than the input already has, a copy
        of the input is returned instead.

        Args:
            ledger: Ledger to simplify

        Returns:
            New ledger holding only the settling edges
        """
        tolerance = self._tolerance_for(ledger)
        simplified = BalanceLedger(tolerance)
        for owner_id in ledger.owners():
            simplified.add_owner(owner_id)

        for transfer in self.settlement_plan(ledger):
            simplified.post(transfer.creditor_id, transfer.debtor_id, transfer.amount)

        if simplified.edge_count() > ledger.edge_count():
            logger.debug(
                f"Greedy plan needs {simplified.edge_count()} edges, "
                f"keeping the existing {ledger.edge_count()}"
            )
            return ledger.copy()

        logger.debug(
            f"Simplified ledger from {ledger.edge_count()} to {simplified.edge_count()} edges"
        )
        return simplified

    def settlement_plan(self, ledger: BalanceLedger) -> List[Transfer]:
        """Transfers that settle every net position in the ledger."""
        return self.minimize_transactions(ledger.net_amounts(), self._tolerance_for(ledger))

    def minimize_transactions(
            self,
            balances: Dict[str, Decimal],
            tolerance: Optional[Decimal] = None
    ) -> List[Transfer]:
        """
        Minimize number of transactions using greedy algorithm.

        Algorithm:
        1. Separate into debtors (negative balance) and creditors (positive)
        2. Match largest debtor with largest creditor
        3. Settle as much as possible
        4. Repeat until one side is exhausted

        This is a heuristic: it is not guaranteed to find the fewest
        transfers for every distribution.

        Args:
            balances: Dict of user_id -> net balance (positive = is owed)
            tolerance: Nets within this of zero count as settled

        Returns:
            List of transfers, debtor paying creditor
        """
        tolerance = tolerance if tolerance is not None else (self.tolerance or Decimal("0.01"))

        creditors = [[uid, bal] for uid, bal in balances.items() if bal >= tolerance]
        debtors = [[uid, -bal] for uid, bal in balances.items() if bal <= -tolerance]

        # Sort by amount (descending)
        creditors.sort(key=lambda x: x[1], reverse=True)
        debtors.sort(key=lambda x: x[1], reverse=True)

        transfers = []
        i, j = 0, 0

        while i < len(creditors) and j < len(debtors):
            creditor_id, credit = creditors[i]
            debtor_id, debt = debtors[j]

            amount = round2(min(credit, debt))

            if amount >= tolerance:
                transfers.append(Transfer(debtor_id=debtor_id, creditor_id=creditor_id, amount=amount))

            creditors[i][1] = credit - amount
            debtors[j][1] = debt - amount

            # Move to next if settled
            if creditors[i][1] < tolerance:
                i += 1
            if debtors[j][1] < tolerance:
                j += 1

        return transfers

    def _tolerance_for(self, ledger: BalanceLedger) -> Decimal:
        return self.tolerance if self.tolerance is not None else ledger.tolerance
