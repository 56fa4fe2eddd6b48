"""
Tests for process wiring helpers.
"""
import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from main import build_notifier, shutdown
from telegram_alert import LogOnlyNotifier, TelegramNotifier


class TestShutdown:

    @pytest.mark.asyncio
    async def test_reporter_is_cancelled_and_awaited(self):
        listener = MagicMock()
        session = AsyncMock()
        client = AsyncMock()
        reporter = asyncio.create_task(asyncio.sleep(3600))

        await shutdown(listener, reporter, session, client)

        assert reporter.done()
        assert reporter.cancelled()
        listener.stop.assert_called_once()
        session.close.assert_awaited_once()
        client.close.assert_awaited_once()


class TestBuildNotifier:

    def test_telegram_when_enabled(self):
        config = {"ENABLE_TELEGRAM": True, "TELEGRAM_BOT_TOKEN": "t", "TELEGRAM_CHAT_ID": "c"}

        assert isinstance(build_notifier(config), TelegramNotifier)

    def test_log_only_without_credentials(self):
        assert isinstance(build_notifier({"ENABLE_TELEGRAM": True}), LogOnlyNotifier)
