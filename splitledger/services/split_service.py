"""Service for dividing an expense total into per-participant shares."""

import logging
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import List, Optional, Sequence

from splitledger.config.settings import Settings, settings as default_settings
from splitledger.exceptions import InvalidSplitError, SplitMismatchError
from splitledger.models.expense import Split
from splitledger.utils.constants import SplitType
from splitledger.utils.validators import CENT, Number, round2, to_decimal, validate_percentage

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


class SplitService:
    """Pure share calculations for equal, exact and percentage splits."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def calculate(
            self,
            split_type: SplitType,
            total_amount: Number,
            participant_ids: Sequence[str],
            values: Optional[Sequence[Number]] = None
    ) -> List[Split]:
        """
        Calculate each participant's share.

        Args:
            split_type: Which rule to apply
            total_amount: Expense total
            participant_ids: Ordered participants; the first absorbs equal-split rounding
            values: Amounts (exact) or percentages (percentage); ignored for equal

        Returns:
            Splits in participant order

        Raises:
            InvalidSplitError: Participants or values are malformed
            SplitMismatchError: Values do not add up (strict mode)
        """
        total = round2(to_decimal(total_amount))
        participants = list(participant_ids)

        if not participants:
            raise InvalidSplitError("at least one participant is required")
        if len(set(participants)) != len(participants):
            raise InvalidSplitError("participants must be unique")

        try:
            split_type = SplitType(split_type)
        except ValueError:
            raise InvalidSplitError(f"unsupported split type: {split_type!r}") from None

        if split_type == SplitType.EQUAL:
            return self._equal(total, participants)
        elif split_type == SplitType.EXACT:
            return self._exact(total, participants, self._parse_values(participants, values))
        return self._percentage(total, participants, self._parse_percentages(participants, values))

    def _equal(self, total: Decimal, participants: List[str]) -> List[Split]:
        per_person = (total / len(participants)).quantize(CENT, rounding=ROUND_DOWN)
        remainder = total - per_person * len(participants)

        shares = [per_person] * len(participants)
        # Rounding remainder goes to the first participant
        shares[0] += remainder
        return [Split(user_id=uid, amount=amount) for uid, amount in zip(participants, shares)]

    def _exact(self, total: Decimal, participants: List[str], amounts: List[Decimal]) -> List[Split]:
        shares = [round2(a) for a in amounts]

        if self.config.strict_splits:
            self._check_sum(sum(shares, Decimal("0")), total, "exact amounts")
            self._absorb_residual(total, shares)

        return [Split(user_id=uid, amount=amount) for uid, amount in zip(participants, shares)]

    def _percentage(self, total: Decimal, participants: List[str], percentages: List[Decimal]) -> List[Split]:
        if self.config.strict_splits:
            self._check_sum(sum(percentages, Decimal("0")), HUNDRED, "percentages")

        shares = [round2(total * pct / HUNDRED) for pct in percentages]

        if self.config.strict_splits:
            self._absorb_residual(total, shares)

        return [Split(user_id=uid, amount=amount) for uid, amount in zip(participants, shares)]

    @staticmethod
    def _absorb_residual(total: Decimal, shares: List[Decimal]) -> None:
        # Largest share takes the residual so no share goes negative
        largest = shares.index(max(shares))
        shares[largest] += total - sum(shares, Decimal("0"))

    def _check_sum(self, actual: Decimal, expected: Decimal, label: str) -> None:
        if abs(actual - expected) > self.config.tolerance:
            logger.warning(f"Rejected split: {label} sum to {actual}, expected {expected}")
            raise SplitMismatchError(f"{label} sum to {actual}, expected {expected}")

    @staticmethod
    def _parse_values(participants: List[str], values: Optional[Sequence[Number]]) -> List[Decimal]:
        if values is None or len(values) != len(participants):
            raise InvalidSplitError("one value per participant is required")

        parsed = []
        for value in values:
            try:
                amount = to_decimal(value)
            except (InvalidOperation, ValueError, TypeError):
                raise InvalidSplitError(f"invalid split amount: {value!r}") from None
            if not amount.is_finite() or amount < 0:
                raise InvalidSplitError(f"split amounts must be non-negative: {value!r}")
            parsed.append(amount)
        return parsed

    @staticmethod
    def _parse_percentages(participants: List[str], values: Optional[Sequence[Number]]) -> List[Decimal]:
        if values is None or len(values) != len(participants):
            raise InvalidSplitError("one percentage per participant is required")

        parsed = []
        for value in values:
            is_valid, percentage, error = validate_percentage(value)
            if not is_valid:
                raise InvalidSplitError(f"{error}: {value!r}")
            parsed.append(percentage)
        return parsed
