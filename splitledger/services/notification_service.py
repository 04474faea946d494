"""Notification sinks that receive ledger events per user."""

import logging
from typing import Dict, List, Optional, Protocol, Tuple

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from splitledger.config.settings import Settings

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Receives a human-readable message for one recipient."""

    def notify(self, recipient_id: str, message: str) -> None:
        ...


class LogNotificationSink:
    """Writes every notification to the log."""

    def __init__(self, logger_name: str = "splitledger.notifications"):
        self._logger = logging.getLogger(logger_name)

    def notify(self, recipient_id: str, message: str) -> None:
        self._logger.info(f"Notification for {recipient_id}: {message}")


class InMemoryNotificationSink:
    """Keeps every notification in order."""

    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def notify(self, recipient_id: str, message: str) -> None:
        self.messages.append((recipient_id, message))

    def messages_for(self, recipient_id: str) -> List[str]:
        return [message for rid, message in self.messages if rid == recipient_id]

    def clear(self) -> None:
        self.messages.clear()


class TelegramNotificationSink:
    """
    Delivers notifications to Telegram chats.

    Ledger operations are synchronous, so ``notify`` only queues the message.
    ``flush`` sends everything queued and must be awaited from the
    application's event loop.
    """

    def __init__(self, bot: Bot, chat_ids: Optional[Dict[str, int]] = None):
        self.bot = bot
        self.chat_ids: Dict[str, int] = dict(chat_ids or {})
        self._outbox: List[Tuple[int, str]] = []

    @classmethod
    def from_settings(cls, config: Settings, chat_ids: Optional[Dict[str, int]] = None) -> "TelegramNotificationSink":
        """Build a sink with a bot using the configured token."""
        if not config.telegram_bot_token:
            raise ValueError("TELEGRAM_BOT_TOKEN is not configured")
        return cls(Bot(token=config.telegram_bot_token), chat_ids)

    def register_chat(self, user_id: str, chat_id: int) -> None:
        self.chat_ids[user_id] = chat_id

    @property
    def pending(self) -> int:
        return len(self._outbox)

    def notify(self, recipient_id: str, message: str) -> None:
        chat_id = self.chat_ids.get(recipient_id)
        if chat_id is None:
            logger.debug(f"No Telegram chat for user {recipient_id}, skipping")
            return
        self._outbox.append((chat_id, message))

    async def flush(self) -> int:
        """
        Send all queued messages.

        Returns:
            Number of messages delivered
        """
        outbox, self._outbox = self._outbox, []
        delivered = 0

        for chat_id, message in outbox:
            try:
                await self.bot.send_message(chat_id, message)
                delivered += 1
            except TelegramAPIError as e:
                # User might have blocked the bot or not started conversation
                logger.warning(f"Failed to send notification to chat {chat_id}: {e}")

        return delivered
