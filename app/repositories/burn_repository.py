"""
Burn repository.

Data access layer for recorded burns.
"""

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.burn import Burn
from app.repositories.base import BaseRepository


class BurnRepository(BaseRepository[Burn]):
    """Repository for recorded burns."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository."""
        super().__init__(Burn, session)

    @staticmethod
    def normalize_hash(tx_hash: str) -> str:
        """Lowercase and 0x-prefix a transaction hash."""
        normalized = tx_hash.lower()
        if not normalized.startswith("0x"):
            normalized = f"0x{normalized}"
        return normalized

    async def tx_exists(self, tx_hash: str) -> bool:
        """
        Check if a burn with this hash is recorded.

        Args:
            tx_hash: Transaction hash

        Returns:
            True if recorded
        """
        return await self.exists(tx_hash=self.normalize_hash(tx_hash))

    async def insert_ignore_duplicate(
        self,
        tx_hash: str,
        block_number: int,
        timestamp: int,
        amount: str,
        amount_raw: str,
        initiator: str,
        destination: str,
        transfer_from: str | None = None,
        gas_used: str | None = None,
        gas_price: str | None = None,
    ) -> bool:
        """
        Insert a burn unless its hash is already recorded.

        Single INSERT ... ON CONFLICT (tx_hash) DO NOTHING statement.

        Returns:
            True if a row was written, False on duplicate
        """
        stmt = (
            self._insert()
            .values(
                tx_hash=self.normalize_hash(tx_hash),
                block_number=block_number,
                timestamp=timestamp,
                amount=amount,
                amount_raw=amount_raw,
                initiator=initiator.lower(),
                transfer_from=transfer_from.lower() if transfer_from else None,
                destination=destination,
                gas_used=gas_used,
                gas_price=gas_price,
            )
            .on_conflict_do_nothing(index_elements=["tx_hash"])
            .returning(Burn.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_recent(self, limit: int = 10) -> list[Burn]:
        """
        Get most recent burns by block timestamp.

        Args:
            limit: Max results

        Returns:
            Burns, newest first
        """
        query = (
            select(Burn)
            .order_by(Burn.timestamp.desc(), Burn.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_total_amount_raw(self) -> int:
        """
        Exact sum of raw amounts.

        Summed as Python ints to keep full precision on every backend.
        """
        result = await self.session.scalars(select(Burn.amount_raw))
        return sum((int(amount_raw) for amount_raw in result), 0)

    async def get_timestamp_bounds(self) -> tuple[int | None, int | None, int]:
        """
        Get (first timestamp, last timestamp, count).
        """
        query = select(
            func.min(Burn.timestamp),
            func.max(Burn.timestamp),
            func.count(Burn.id),
        )
        result = await self.session.execute(query)
        first_ts, last_ts, count = result.one()
        return first_ts, last_ts, count or 0

    async def get_top_initiators(self, limit: int = 3) -> list[tuple[str, int]]:
        """
        Get initiators with the most burns.

        Returns:
            List of (address, transaction count), busiest first
        """
        tx_count = func.count(Burn.id).label("transaction_count")
        query = (
            select(Burn.initiator, tx_count)
            .group_by(Burn.initiator)
            .order_by(tx_count.desc(), Burn.initiator.asc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [(row.initiator, row.transaction_count) for row in result]

    async def get_unique_initiator_count(self) -> int:
        """Count distinct initiators."""
        query = select(func.count(distinct(Burn.initiator)))
        result = await self.session.execute(query)
        return result.scalar() or 0
