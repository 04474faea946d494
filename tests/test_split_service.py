from decimal import Decimal

import pytest

from splitledger.config.settings import Settings
from splitledger.exceptions import InvalidSplitError, SplitMismatchError, ValidationError
from splitledger.services.split_service import SplitService
from splitledger.utils.constants import SplitType


@pytest.fixture
def splitter(config):
    return SplitService(config)


def amounts(splits):
    return [s.amount for s in splits]


def test_equal_split_even(splitter):
    splits = splitter.calculate(SplitType.EQUAL, 800, ["A", "B", "C", "D"])

    assert [s.user_id for s in splits] == ["A", "B", "C", "D"]
    assert amounts(splits) == [Decimal("200.00")] * 4


def test_equal_split_remainder_goes_to_first(splitter):
    splits = splitter.calculate(SplitType.EQUAL, 100, ["A", "B", "C"])

    assert amounts(splits) == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
    assert sum(amounts(splits)) == Decimal("100.00")


def test_equal_split_ignores_values(splitter):
    splits = splitter.calculate(SplitType.EQUAL, 10, ["A", "B"], [1, 9])

    assert amounts(splits) == [Decimal("5.00"), Decimal("5.00")]


def test_equal_split_accepts_string_type(splitter):
    splits = splitter.calculate("equal", "40", ["A", "B"])

    assert amounts(splits) == [Decimal("20.00"), Decimal("20.00")]


def test_exact_split_uses_given_amounts(splitter):
    splits = splitter.calculate(SplitType.EXACT, 700, ["A", "C", "D"], [200, 300, 200])

    assert amounts(splits) == [Decimal("200.00"), Decimal("300.00"), Decimal("200.00")]


def test_exact_split_mismatch_rejected(splitter):
    with pytest.raises(SplitMismatchError):
        splitter.calculate(SplitType.EXACT, 200, ["A", "B"], [100, 50])


def test_exact_split_mismatch_allowed_when_not_strict():
    splitter = SplitService(Settings(strict_splits=False))

    splits = splitter.calculate(SplitType.EXACT, 200, ["A", "B"], [100, 50])

    assert amounts(splits) == [Decimal("100.00"), Decimal("50.00")]


def test_exact_split_rejects_negative_values(splitter):
    with pytest.raises(InvalidSplitError):
        splitter.calculate(SplitType.EXACT, 100, ["A", "B"], [150, -50])


def test_percentage_split(splitter):
    splits = splitter.calculate(SplitType.PERCENTAGE, 200, ["A", "B", "C"], [50, 30, 20])

    assert amounts(splits) == [Decimal("100.00"), Decimal("60.00"), Decimal("40.00")]


def test_percentage_split_rounding_residual_goes_to_largest_share(splitter):
    splits = splitter.calculate(SplitType.PERCENTAGE, "99.99", ["A", "B", "C"], [50, 30, 20])

    assert amounts(splits) == [Decimal("49.99"), Decimal("30.00"), Decimal("20.00")]
    assert sum(amounts(splits)) == Decimal("99.99")


def test_percentage_split_accepts_percent_strings(splitter):
    splits = splitter.calculate(SplitType.PERCENTAGE, 10, ["A", "B"], ["25%", "75%"])

    assert amounts(splits) == [Decimal("2.50"), Decimal("7.50")]


def test_percentage_split_must_total_hundred(splitter):
    with pytest.raises(SplitMismatchError):
        splitter.calculate(SplitType.PERCENTAGE, 100, ["A", "B"], [50, 40])


def test_percentage_out_of_range_rejected(splitter):
    with pytest.raises(InvalidSplitError):
        splitter.calculate(SplitType.PERCENTAGE, 100, ["A", "B"], [150, -50])


@pytest.mark.parametrize(
    "participants, values",
    [
        ([], None),
        (["A", "A"], None),
    ],
)
def test_malformed_participants_rejected(splitter, participants, values):
    with pytest.raises(InvalidSplitError):
        splitter.calculate(SplitType.EQUAL, 100, participants, values)


@pytest.mark.parametrize("split_type", [SplitType.EXACT, SplitType.PERCENTAGE])
def test_values_must_match_participants(splitter, split_type):
    with pytest.raises(InvalidSplitError):
        splitter.calculate(split_type, 100, ["A", "B"], [100])

    with pytest.raises(InvalidSplitError):
        splitter.calculate(split_type, 100, ["A", "B"])


def test_unknown_split_type_rejected(splitter):
    with pytest.raises(InvalidSplitError):
        splitter.calculate("shares", 100, ["A", "B"])


def test_exact_residual_never_makes_a_share_negative(splitter):
    splits = splitter.calculate(SplitType.EXACT, "0.01", ["A", "B"], [0, "0.02"])

    assert amounts(splits) == [Decimal("0.00"), Decimal("0.01")]
    assert all(amount >= 0 for amount in amounts(splits))


def test_exact_residual_within_tolerance_goes_to_largest_share(splitter):
    splits = splitter.calculate(SplitType.EXACT, 100, ["A", "B", "C"], [10, "89.99", 0])

    assert amounts(splits) == [Decimal("10.00"), Decimal("90.00"), Decimal("0.00")]


def test_malformed_input_is_not_a_sum_mismatch(splitter):
    with pytest.raises(InvalidSplitError) as excinfo:
        splitter.calculate(SplitType.EQUAL, 100, ["A", "A"])

    assert not isinstance(excinfo.value, SplitMismatchError)
    assert isinstance(excinfo.value, ValidationError)
