"""Facade over users, groups and the direct (non-group) ledger."""

import itertools
import logging
from decimal import Decimal
from threading import RLock
from typing import Dict, Optional, Sequence

from splitledger.config.settings import Settings, settings as default_settings
from splitledger.exceptions import (
    GroupNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from splitledger.models.expense import BalanceSummary, Expense, Settlement
from splitledger.models.ledger import Balances, BalanceLedger
from splitledger.models.user import User
from splitledger.services.calculation_service import DebtSimplifier
from splitledger.services.group_service import GroupAccount, id_sequence, notify_all, parse_amount
from splitledger.services.notification_service import LogNotificationSink, NotificationSink
from splitledger.services.split_service import SplitService
from splitledger.utils.constants import (
    EXPENSE_ID_PREFIX,
    GROUP_ID_PREFIX,
    USER_ID_PREFIX,
    SplitType,
)
from splitledger.utils.formatters import format_expense_added, format_settlement
from splitledger.utils.validators import Number, validate_description, validate_name

logger = logging.getLogger(__name__)


class LedgerService:
    """
    Entry point for expense sharing.

    Each instance is independent: it owns its users, groups and direct
    ledger, and shares nothing with other instances.
    """

    def __init__(
            self,
            notifier: Optional[NotificationSink] = None,
            config: Optional[Settings] = None
    ):
        self.config = config or default_settings
        self.notifier = notifier or LogNotificationSink()
        self.split_service = SplitService(self.config)
        self.simplifier = DebtSimplifier()
        self.direct_ledger = BalanceLedger(self.config.tolerance)
        self.expenses: Dict[str, Expense] = {}

        self._users: Dict[str, User] = {}
        self._groups: Dict[str, GroupAccount] = {}
        self._lock = RLock()
        self._user_seq = itertools.count(1)
        self._group_seq = itertools.count(1)
        self._expense_ids = id_sequence(EXPENSE_ID_PREFIX)

    # ===== Users =====

    def create_user(self, name: str, email: Optional[str] = None) -> User:
        is_valid, error = validate_name(name)
        if not is_valid:
            raise ValidationError(error)

        with self._lock:
            user_id = f"{USER_ID_PREFIX}{next(self._user_seq)}"
            user = User(user_id, name.strip(), self.direct_ledger, email)
            self._users[user_id] = user

        logger.info(f"User created: {user.name} (ID: {user_id})")
        return user

    def get_user(self, user_id: str) -> User:
        try:
            return self._users[user_id]
        except KeyError:
            raise UserNotFoundError(f"user not found: {user_id}") from None

    # ===== Groups =====

    def create_group(self, name: str) -> GroupAccount:
        is_valid, error = validate_name(name)
        if not is_valid:
            raise ValidationError(error)

        with self._lock:
            group_id = f"{GROUP_ID_PREFIX}{next(self._group_seq)}"
            group = GroupAccount(
                group_id,
                name.strip(),
                notifier=self.notifier,
                config=self.config,
                split_service=self.split_service,
                simplifier=self.simplifier,
                expense_ids=self._expense_ids,
            )
            self._groups[group_id] = group

        logger.info(f"Group created: {group.name} (ID: {group_id})")
        return group

    def get_group(self, group_id: str) -> GroupAccount:
        try:
            return self._groups[group_id]
        except KeyError:
            raise GroupNotFoundError(f"group not found: {group_id}") from None

    def add_user_to_group(self, user_id: str, group_id: str) -> None:
        self.get_group(group_id).add_member(self.get_user(user_id))

    def remove_member(self, group_id: str, user_id: str) -> None:
        """
        Raises:
            OpenBalanceError: User still has balances in the group
        """
        self.get_group(group_id).remove_member(user_id)

    # ===== Group expenses =====

    def create_expense(
            self,
            group_id: str,
            description: str,
            amount: Number,
            payer_id: str,
            participant_ids: Sequence[str],
            split_type: SplitType,
            values: Optional[Sequence[Number]] = None
    ) -> str:
        """Add a group expense and return its id."""
        group = self.get_group(group_id)
        expense = group.add_expense(description, amount, payer_id, participant_ids, split_type, values)
        return expense.expense_id

    def settle(self, group_id: str, from_id: str, to_id: str, amount: Number) -> Settlement:
        return self.get_group(group_id).settle(from_id, to_id, amount)

    def simplify(self, group_id: str) -> Balances:
        return self.get_group(group_id).simplify()

    def get_balances(self, owner_id: str, group_id: Optional[str] = None) -> Dict[str, Decimal]:
        """
        Balances of one owner; the direct ledger when no group is given.

        Raises:
            UnknownMemberError: Owner has no row in that ledger
        """
        if group_id is None:
            with self._lock:
                return self.direct_ledger.balances_of(owner_id)
        return self.get_group(group_id).balances_of(owner_id)

    # ===== Individual expenses =====

    def add_individual_expense(
            self,
            description: str,
            amount: Number,
            payer_id: str,
            other_id: str,
            split_type: SplitType = SplitType.EQUAL,
            values: Optional[Sequence[Number]] = None
    ) -> Expense:
        """
        Share an expense between two users outside any group.

        The split runs over ``[payer, other]``; only the other's share is
        posted to the direct ledger.
        """
        is_valid, error = validate_description(description)
        if not is_valid:
            raise ValidationError(error)
        total = parse_amount(amount, self.config)
        if payer_id == other_id:
            raise ValidationError("an individual expense needs two different users")

        payer = self.get_user(payer_id)
        self.get_user(other_id)

        splits = self.split_service.calculate(split_type, total, [payer_id, other_id], values)

        with self._lock:
            expense = Expense(
                expense_id=next(self._expense_ids),
                description=description.strip(),
                total_amount=total,
                payer_id=payer_id,
                split_type=SplitType(split_type),
                splits=tuple(splits),
            )
            self.direct_ledger.post(payer_id, other_id, expense.share_of(other_id))
            self.expenses[expense.expense_id] = expense

        logger.info(f"Individual expense added: {expense.description} paid by {payer.name}")
        notify_all(
            self.notifier,
            [payer_id, other_id],
            format_expense_added(expense, payer.name, self.config.currency),
        )
        return expense

    def settle_individual(self, from_id: str, to_id: str, amount: Number) -> Settlement:
        paid = parse_amount(amount, self.config)
        if from_id == to_id:
            raise ValidationError("payer and payee must be different users")

        payer = self.get_user(from_id)
        payee = self.get_user(to_id)

        with self._lock:
            self.direct_ledger.post(from_id, to_id, paid)
            settlement = Settlement(payer_id=from_id, payee_id=to_id, amount=paid)

        message = format_settlement(settlement, payer.name, payee.name, self.config.currency)
        logger.info(message)
        notify_all(self.notifier, [from_id, to_id], message)
        return settlement

    def user_summary(self, user_id: str) -> BalanceSummary:
        user = self.get_user(user_id)
        with self._lock:
            return BalanceSummary(
                user_id=user_id,
                total_owed=user.total_owed(),
                total_owing=user.total_owing(),
                balances=user.balances,
            )
