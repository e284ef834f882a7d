"""Unit tests for the /stats and /test command handlers."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from bot.handlers.stats import cmd_stats, cmd_test


@pytest.fixture
def message():
    msg = MagicMock()
    msg.chat.id = 42
    msg.answer = AsyncMock()
    return msg


@pytest.fixture
def burn_store(sample_stats):
    store = AsyncMock()
    store.aggregate_stats.return_value = sample_stats
    return store


@pytest.mark.asyncio
async def test_stats_command_replies_with_statistics(message, burn_store, settings):
    await cmd_stats(message, burn_store=burn_store, settings=settings)

    text = message.answer.await_args.args[0]
    assert "UNI Burn Statistics" in text
    assert "12,345,600 UNI" in text
    assert message.answer.await_args.kwargs["link_preview_options"].is_disabled


@pytest.mark.asyncio
async def test_test_command_replies_with_mock_alert(message, burn_store, settings):
    await cmd_test(message, burn_store=burn_store, settings=settings)

    text = message.answer.await_args.args[0]
    assert text.startswith("🧪 <b>TEST: UNI Burn Detected</b>")
