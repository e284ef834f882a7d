"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.base import Base
from app.models.bot_state import BotState
from app.models.burn import Burn

__all__ = [
    "Base",
    "BotState",
    "Burn",
]
