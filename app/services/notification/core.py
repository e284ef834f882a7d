"""
Core notification sink.

Delivers HTML messages to the Telegram channel and reports success or
failure instead of raising, so the scanner can hold back its checkpoint.
"""

import asyncio

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.types import LinkPreviewOptions
from loguru import logger

from app.config.constants import TELEGRAM_TIMEOUT


class TelegramNotificationSink:
    """Telegram channel delivery."""

    def __init__(self, bot: Bot) -> None:
        """Initialize sink with an aiogram Bot."""
        self.bot = bot

    async def deliver(self, channel: str, message: str) -> bool:
        """
        Send an HTML message with link previews disabled.

        Args:
            channel: Channel id or @username
            message: HTML text

        Returns:
            True if Telegram accepted the message
        """
        try:
            await asyncio.wait_for(
                self.bot.send_message(
                    chat_id=channel,
                    text=message,
                    parse_mode="HTML",
                    link_preview_options=LinkPreviewOptions(is_disabled=True),
                ),
                timeout=TELEGRAM_TIMEOUT,
            )
        except TimeoutError:
            logger.error(
                f"[Telegram] Timed out after {TELEGRAM_TIMEOUT}s sending to {channel}"
            )
            return False
        except TelegramAPIError as e:
            logger.error(f"[Telegram] Failed to send message to {channel}: {e}")
            return False

        logger.info(f"[Telegram] Message sent to {channel}")
        return True

    async def test_connection(self, channel: str) -> bool:
        """
        Verify the bot token and channel access.

        Returns:
            True if get_me and get_chat both succeed
        """
        try:
            me = await asyncio.wait_for(self.bot.get_me(), timeout=TELEGRAM_TIMEOUT)
            logger.info(f"[Telegram] Connected as @{me.username}")

            chat = await asyncio.wait_for(
                self.bot.get_chat(channel), timeout=TELEGRAM_TIMEOUT
            )
            logger.info(f"[Telegram] Channel verified: {chat.title or channel}")
        except (TelegramAPIError, TimeoutError) as e:
            logger.error(f"[Telegram] Connection test failed: {e}")
            return False
        return True
