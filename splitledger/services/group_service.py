"""Group accounts: membership, shared ledger, expenses and settlements."""

import itertools
import logging
from decimal import Decimal
from threading import RLock
from typing import Dict, Iterator, List, Optional, Sequence

from splitledger.config.settings import Settings, settings as default_settings
from splitledger.exceptions import (
    InvalidAmountError,
    NotAMemberError,
    OpenBalanceError,
    ValidationError,
)
from splitledger.models.expense import Expense, Settlement
from splitledger.models.ledger import Balances, BalanceLedger
from splitledger.models.user import User
from splitledger.services.calculation_service import DebtSimplifier
from splitledger.services.notification_service import LogNotificationSink, NotificationSink
from splitledger.services.split_service import SplitService
from splitledger.utils.constants import (
    EXPENSE_ID_PREFIX,
    MSG_DEBTS_SIMPLIFIED,
    MSG_MEMBER_ADDED,
    MSG_MEMBER_LEFT,
    SplitType,
)
from splitledger.utils.formatters import format_expense_added, format_settlement
from splitledger.utils.validators import Number, validate_amount, validate_description

logger = logging.getLogger(__name__)


def id_sequence(prefix: str) -> Iterator[str]:
    """``prefix1``, ``prefix2``, ... safe to share between threads."""
    return map(prefix.__add__, map(str, itertools.count(1)))


def parse_amount(amount: Number, config: Settings) -> Decimal:
    """Validated amount or ``InvalidAmountError``."""
    is_valid, value, error = validate_amount(amount, config.max_amount)
    if not is_valid:
        raise InvalidAmountError(f"{error}: {amount!r}")
    return value


def notify_all(sink: NotificationSink, recipient_ids: Sequence[str], message: str) -> None:
    """Fan a message out; a failing sink never undoes the posting."""
    for recipient_id in recipient_ids:
        try:
            sink.notify(recipient_id, message)
        except Exception as e:
            logger.warning(f"Failed to notify {recipient_id}: {e}")


class GroupAccount:
    """
    A group of users sharing one ledger.

    Every operation holds the group's lock, so an expense can never
    interleave with a simplification swap.
    """

    def __init__(
            self,
            group_id: str,
            name: str,
            notifier: Optional[NotificationSink] = None,
            config: Optional[Settings] = None,
            split_service: Optional[SplitService] = None,
            simplifier: Optional[DebtSimplifier] = None,
            expense_ids: Optional[Iterator[str]] = None
    ):
        self.group_id = group_id
        self.name = name
        self.config = config or default_settings
        self.notifier = notifier or LogNotificationSink()
        self.split_service = split_service or SplitService(self.config)
        self.simplifier = simplifier or DebtSimplifier()
        self.ledger = BalanceLedger(self.config.tolerance)
        self.expenses: Dict[str, Expense] = {}
        self.settlements: List[Settlement] = []

        self._members: Dict[str, User] = {}
        self._lock = RLock()
        self._expense_ids = expense_ids or id_sequence(EXPENSE_ID_PREFIX)

    def __repr__(self) -> str:
        return f"<GroupAccount(id={self.group_id}, name='{self.name}', members={len(self._members)})>"

    # ===== Membership =====

    @property
    def members(self) -> List[User]:
        with self._lock:
            return list(self._members.values())

    @property
    def member_ids(self) -> List[str]:
        with self._lock:
            return list(self._members)

    def is_member(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._members

    def add_member(self, user: User) -> None:
        with self._lock:
            if user.user_id in self._members:
                logger.info(f"{user.name} is already in group {self.name}")
                return

            self._members[user.user_id] = user
            self.ledger.add_owner(user.user_id)

        logger.info(MSG_MEMBER_ADDED.format(name=user.name, group=self.name))

    def can_leave(self, user_id: str) -> bool:
        with self._lock:
            self._require_member(user_id)
            return self.ledger.is_settled(user_id)

    def remove_member(self, user_id: str) -> None:
        """
        Remove a settled member and every ledger reference to them.

        Raises:
            NotAMemberError: User is not in the group
            OpenBalanceError: User still owes or is owed money
        """
        with self._lock:
            user = self._require_member(user_id)
            if not self.ledger.is_settled(user_id):
                logger.warning(f"{user.name} cannot leave {self.name} with open balances")
                raise OpenBalanceError(user_id, self.group_id)

            del self._members[user_id]
            self.ledger.remove_owner(user_id)
            recipients = list(self._members)

        message = MSG_MEMBER_LEFT.format(name=user.name, group=self.name)
        logger.info(message)
        notify_all(self.notifier, recipients, message)

    # ===== Expenses =====

    def add_expense(
            self,
            description: str,
            amount: Number,
            payer_id: str,
            participant_ids: Sequence[str],
            split_type: SplitType,
            values: Optional[Sequence[Number]] = None
    ) -> Expense:
        """
        Split an expense and post each non-payer share to the group ledger.

        Args:
            description: What the money was spent on
            amount: Total paid, greater than zero
            payer_id: Member who paid
            participant_ids: Members sharing the cost (the payer may be one)
            split_type: How to split
            values: Exact amounts or percentages, in participant order

        Returns:
            The recorded expense

        Raises:
            ValidationError: Empty description
            InvalidAmountError: Non-positive or non-finite amount
            NotAMemberError: Payer or a participant is not a member
            SplitMismatchError: Split values do not add up
            InvalidSplitError: Split values are malformed
        """
        is_valid, error = validate_description(description)
        if not is_valid:
            raise ValidationError(error)
        total = parse_amount(amount, self.config)

        with self._lock:
            payer = self._require_member(payer_id)
            for user_id in participant_ids:
                self._require_member(user_id)

            splits = self.split_service.calculate(split_type, total, participant_ids, values)

            staged = self.ledger.copy()
            for split in splits:
                if split.user_id != payer_id:
                    staged.post(payer_id, split.user_id, split.amount)

            expense = Expense(
                expense_id=next(self._expense_ids),
                description=description.strip(),
                total_amount=total,
                payer_id=payer_id,
                split_type=SplitType(split_type),
                splits=tuple(splits),
                group_id=self.group_id,
            )
            self.ledger = staged
            self.expenses[expense.expense_id] = expense
            recipients = list(self._members)

        logger.info(f"Expense added to {self.name}: {expense.description} paid by {payer.name}")
        notify_all(
            self.notifier,
            recipients,
            format_expense_added(expense, payer.name, self.config.currency),
        )
        return expense

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        with self._lock:
            return self.expenses.get(expense_id)

    # ===== Settlement =====

    def settle(self, payer_id: str, payee_id: str, amount: Number) -> Settlement:
        """
        Record that payer paid payee, reducing what payer owes payee.

        Raises:
            InvalidAmountError: Non-positive or non-finite amount
            NotAMemberError: Either side is not a member
            ValidationError: Payer and payee are the same user
        """
        paid = parse_amount(amount, self.config)
        if payer_id == payee_id:
            raise ValidationError("payer and payee must be different users")

        with self._lock:
            payer = self._require_member(payer_id)
            payee = self._require_member(payee_id)

            self.ledger.post(payer_id, payee_id, paid)
            settlement = Settlement(payer_id=payer_id, payee_id=payee_id, amount=paid, group_id=self.group_id)
            self.settlements.append(settlement)
            recipients = list(self._members)

        message = format_settlement(settlement, payer.name, payee.name, self.config.currency)
        logger.info(f"{message} in {self.name}")
        notify_all(self.notifier, recipients, message)
        return settlement

    # ===== Balances =====

    def balances_of(self, user_id: str) -> Dict[str, Decimal]:
        with self._lock:
            return self.ledger.balances_of(user_id)

    def net_amounts(self) -> Dict[str, Decimal]:
        with self._lock:
            return self.ledger.net_amounts()

    def snapshot(self) -> Balances:
        with self._lock:
            return self.ledger.snapshot()

    def simplify(self) -> Balances:
        """Replace the ledger with its simplified equivalent."""
        with self._lock:
            before = self.ledger.edge_count()
            self.ledger = self.simplifier.simplify(self.ledger)
            after = self.ledger.edge_count()
            snapshot = self.ledger.snapshot()
            recipients = list(self._members)

        logger.info(f"Debts simplified for {self.name}: {before} -> {after} edges")
        notify_all(self.notifier, recipients, MSG_DEBTS_SIMPLIFIED.format(group=self.name))
        return snapshot

    def _require_member(self, user_id: str) -> User:
        try:
            return self._members[user_id]
        except KeyError:
            logger.warning(f"User {user_id} is not a member of {self.name}")
            raise NotAMemberError(user_id, self.group_id) from None
