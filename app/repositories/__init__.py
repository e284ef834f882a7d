"""
Repositories.

Data access layer over async SQLAlchemy sessions.
"""

from app.repositories.base import BaseRepository
from app.repositories.bot_state_repository import BotStateRepository
from app.repositories.burn_repository import BurnRepository

__all__ = ["BaseRepository", "BotStateRepository", "BurnRepository"]
