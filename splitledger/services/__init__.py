"""Services package."""

from splitledger.services.split_service import SplitService
from splitledger.services.calculation_service import DebtSimplifier
from splitledger.services.group_service import GroupAccount
from splitledger.services.ledger_service import LedgerService
from splitledger.services.notification_service import (
    InMemoryNotificationSink,
    LogNotificationSink,
    NotificationSink,
    TelegramNotificationSink,
)

__all__ = [
    "SplitService",
    "DebtSimplifier",
    "GroupAccount",
    "LedgerService",
    "NotificationSink",
    "LogNotificationSink",
    "InMemoryNotificationSink",
    "TelegramNotificationSink",
]
