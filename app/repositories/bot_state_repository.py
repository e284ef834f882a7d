"""
Bot state repository.

Data access layer for durable key/value state.
"""

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.bot_state import BotState
from app.repositories.base import BaseRepository


class BotStateRepository(BaseRepository[BotState]):
    """Repository for bot state."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository."""
        super().__init__(BotState, session)

    async def get_value(self, key: str) -> str | None:
        """
        Get state value.

        Args:
            key: State key

        Returns:
            Stored value or None if absent
        """
        state = await self.get_by(key=key)
        return state.value if state else None

    async def set_value(self, key: str, value: str) -> None:
        """
        Atomically insert or overwrite a state value.

        Args:
            key: State key
            value: New value
        """
        insert_stmt = self._insert().values(
            key=key, value=value, updated_at=datetime.now(UTC)
        )
        stmt = insert_stmt.on_conflict_do_update(
            index_elements=["key"],
            set_={
                "value": insert_stmt.excluded.value,
                "updated_at": insert_stmt.excluded.updated_at,
            },
        )
        await self.session.execute(stmt)
