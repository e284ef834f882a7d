"""
Handlers.

Bot command handlers.
"""

from bot.handlers import stats

__all__ = ["stats"]
