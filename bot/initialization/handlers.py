"""
Bot Initialization - Handlers Module.

Module: handlers.py
Registers bot command handlers.
"""

from aiogram import Dispatcher
from loguru import logger


def register_all_handlers(dp: Dispatcher) -> None:
    """Register command routers on the dispatcher."""
    from bot.handlers import stats

    dp.include_router(stats.router)
    logger.info("[Telegram] Command handlers registered: /stats, /test")
