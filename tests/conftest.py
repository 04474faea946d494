from decimal import Decimal

import pytest

from splitledger.config.settings import Settings
from splitledger.services.ledger_service import LedgerService
from splitledger.services.notification_service import InMemoryNotificationSink
from splitledger.utils.constants import SplitType


def assert_skew_symmetric(balances):
    """Every entry is mirrored by its negation and none is zero."""
    for owner_id, row in balances.items():
        for other_id, amount in row.items():
            assert amount != 0
            assert balances[other_id][owner_id] == -amount


@pytest.fixture
def config():
    return Settings(tolerance=Decimal("0.01"), currency="Rs", strict_splits=True)


@pytest.fixture
def sink():
    return InMemoryNotificationSink()


@pytest.fixture
def service(sink, config):
    return LedgerService(notifier=sink, config=config)


@pytest.fixture
def users(service):
    """Four users: A, B, C, D."""
    return {name: service.create_user(name, f"{name.lower()}@example.com") for name in "ABCD"}


@pytest.fixture
def group(service, users):
    group = service.create_group("Hostel Expenses")
    for user in users.values():
        service.add_user_to_group(user.user_id, group.group_id)
    return group


@pytest.fixture
def scenario(service, users, group):
    """
    A pays 800 split equally among everyone; C pays 700 split exactly as
    A 200, C 300, D 200.
    """
    a, b, c, d = (users[n].user_id for n in "ABCD")
    service.create_expense(group.group_id, "Lunch", 800, a, [a, b, c, d], SplitType.EQUAL)
    service.create_expense(
        group.group_id, "Dinner", 700, c, [a, c, d], SplitType.EXACT, [200, 300, 200]
    )
    return group
