import logging
from unittest.mock import MagicMock

import pytest
from aiogram.exceptions import TelegramAPIError

from splitledger.config.settings import Settings
from splitledger.services.notification_service import (
    InMemoryNotificationSink,
    LogNotificationSink,
    TelegramNotificationSink,
)


class FakeBot:
    """Records sent messages; chats in ``blocked`` raise like Telegram does."""

    def __init__(self, blocked=()):
        self.sent = []
        self.blocked = set(blocked)

    async def send_message(self, chat_id, text):
        if chat_id in self.blocked:
            raise TelegramAPIError(method=MagicMock(), message="Forbidden: bot was blocked by the user")
        self.sent.append((chat_id, text))


def test_in_memory_sink_keeps_order():
    sink = InMemoryNotificationSink()

    sink.notify("U1", "first")
    sink.notify("U2", "second")
    sink.notify("U1", "third")

    assert sink.messages_for("U1") == ["first", "third"]
    assert len(sink.messages) == 3


def test_log_sink_writes_to_logger(caplog):
    sink = LogNotificationSink()

    with caplog.at_level(logging.INFO, logger="splitledger.notifications"):
        sink.notify("U1", "New expense added")

    assert "Notification for U1: New expense added" in caplog.text


def test_telegram_sink_queues_until_flush():
    bot = FakeBot()
    sink = TelegramNotificationSink(bot, {"U1": 111})

    sink.notify("U1", "hello")
    sink.notify("U2", "no chat")

    assert sink.pending == 1
    assert bot.sent == []


@pytest.mark.asyncio
async def test_telegram_sink_flush_delivers():
    bot = FakeBot()
    sink = TelegramNotificationSink(bot, {"U1": 111})
    sink.register_chat("U2", 222)

    sink.notify("U1", "hello")
    sink.notify("U2", "world")
    delivered = await sink.flush()

    assert delivered == 2
    assert bot.sent == [(111, "hello"), (222, "world")]
    assert sink.pending == 0


@pytest.mark.asyncio
async def test_telegram_sink_skips_blocked_chats():
    bot = FakeBot(blocked={111})
    sink = TelegramNotificationSink(bot, {"U1": 111, "U2": 222})

    sink.notify("U1", "hello")
    sink.notify("U2", "world")
    delivered = await sink.flush()

    assert delivered == 1
    assert bot.sent == [(222, "world")]
    assert sink.pending == 0


def test_telegram_sink_from_settings():
    config = Settings(telegram_bot_token="123456:ABC-DEF1234ghIkl")

    sink = TelegramNotificationSink.from_settings(config, {"U1": 111})

    assert sink.bot.token == "123456:ABC-DEF1234ghIkl"
    assert sink.chat_ids == {"U1": 111}


def test_telegram_sink_requires_token():
    with pytest.raises(ValueError):
        TelegramNotificationSink.from_settings(Settings(telegram_bot_token=None))
