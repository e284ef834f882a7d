"""
Stats command handlers.

/stats replies with aggregate burn statistics, /test with a preview of
the burn alert format.
"""

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import LinkPreviewOptions, Message
from loguru import logger

from app.config.settings import Settings
from app.services.burn_store import BurnStore
from app.services.notification.formatters import (
    format_mock_burn_alert,
    format_stats_message,
)

router = Router(name="stats")

NO_PREVIEW = LinkPreviewOptions(is_disabled=True)


@router.message(Command("stats"))
async def cmd_stats(
    message: Message, burn_store: BurnStore, settings: Settings
) -> None:
    """
    Handle /stats command.

    Args:
        message: Telegram message
        burn_store: Store injected via dispatcher workflow data
        settings: Application settings
    """
    stats = await burn_store.aggregate_stats()
    await message.answer(
        format_stats_message(stats, settings), link_preview_options=NO_PREVIEW
    )
    logger.info(f"[Bot] /stats served to chat {message.chat.id}")


@router.message(Command("test"))
async def cmd_test(
    message: Message, burn_store: BurnStore, settings: Settings
) -> None:
    """Handle /test command with a mock burn alert."""
    stats = await burn_store.aggregate_stats()
    await message.answer(
        format_mock_burn_alert(stats, settings), link_preview_options=NO_PREVIEW
    )
