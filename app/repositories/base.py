"""
Base repository.

Lookups and dialect-aware upsert statements shared by repositories.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import Base

# Generic type for model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository over one model and one session.

    Type Parameters:
        ModelType: SQLAlchemy model class

    Example:
        class BurnRepository(BaseRepository[Burn]):
            def __init__(self, session: AsyncSession):
                super().__init__(Burn, session)
    """

    def __init__(
        self, model: type[ModelType], session: AsyncSession
    ) -> None:
        self.model = model
        self.session = session

    async def get_by(self, **filters: Any) -> ModelType | None:
        """
        Get single entity by filters.

        Args:
            **filters: Column filters

        Returns:
            Matching entity or None
        """
        stmt = select(self.model).filter_by(**filters)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists(self, **filters: Any) -> bool:
        """Check if any row matches the filters."""
        stmt = select(self.model).filter_by(**filters).limit(1)
        result = await self.session.execute(stmt)
        return result.first() is not None

    def _insert(self) -> Any:
        """
        Dialect-specific INSERT supporting ON CONFLICT clauses.

        PostgreSQL in production, SQLite in tests.
        """
        dialect = self.session.bind.dialect.name
        if dialect == "postgresql":
            return postgresql.insert(self.model)
        if dialect == "sqlite":
            return sqlite.insert(self.model)
        raise NotImplementedError(f"Upsert not supported for dialect {dialect}")
