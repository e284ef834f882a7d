"""
Burn store.

Checkpoint and dedup store over PostgreSQL. Each operation runs in its
own short session so the scanner, the backfill script and the history
viewer can share one database.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from loguru import logger

from app.config.constants import LAST_PROCESSED_BLOCK_KEY
from app.models.burn import Burn
from app.repositories.bot_state_repository import BotStateRepository
from app.repositories.burn_repository import BurnRepository
from app.services.burn_monitor.types import BurnEvent, BurnStats, TopInitiator


class BurnStore:
    """
    Durable burn records plus the ``lastProcessedBlock`` checkpoint.

    Inserts are idempotent on tx hash. Checkpoint writes are single
    upserts; callers are responsible for only moving it forward.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        """
        Initialize store.

        Args:
            session_maker: Session factory
            engine: Engine to dispose on close (optional)
        """
        self.session_maker = session_maker
        self.engine = engine

    async def ping(self) -> None:
        """Verify the database is reachable."""
        async with self.session_maker() as session:
            await session.execute(text("SELECT 1"))
        logger.info("[Database] Connection verified")

    async def has_record(self, tx_hash: str) -> bool:
        """Check if a burn was already recorded."""
        async with self.session_maker() as session:
            return await BurnRepository(session).tx_exists(tx_hash)

    async def insert_record(self, event: BurnEvent) -> bool:
        """
        Persist a burn.

        Args:
            event: Burn to store

        Returns:
            True if a row was written, False if the hash already existed
        """
        async with self.session_maker() as session:
            inserted = await BurnRepository(session).insert_ignore_duplicate(
                tx_hash=event.tx_hash,
                block_number=event.block_number,
                timestamp=event.timestamp,
                amount=event.amount_formatted,
                amount_raw=str(event.amount_raw),
                initiator=event.initiator,
                destination=str(event.destination),
                transfer_from=event.transfer_from,
                gas_used=event.gas_used,
                gas_price=event.gas_price,
            )
            await session.commit()

        if inserted:
            logger.debug(f"[Database] Saved burn {event.tx_hash}")
        else:
            logger.debug(f"[Database] Burn {event.tx_hash} already recorded")
        return inserted

    async def get_checkpoint(self) -> int | None:
        """Get the last fully processed block, None on first run."""
        async with self.session_maker() as session:
            value = await BotStateRepository(session).get_value(
                LAST_PROCESSED_BLOCK_KEY
            )
        return int(value) if value is not None else None

    async def set_checkpoint(self, block_number: int) -> None:
        """Store the last fully processed block."""
        async with self.session_maker() as session:
            await BotStateRepository(session).set_value(
                LAST_PROCESSED_BLOCK_KEY, str(block_number)
            )
            await session.commit()
        logger.debug(f"[Database] Checkpoint set to block {block_number}")

    async def aggregate_stats(self) -> BurnStats:
        """
        Aggregate statistics over all recorded burns.

        Returns:
            BurnStats with exact integer total, top three initiators and
            average interval between burns
        """
        async with self.session_maker() as session:
            repo = BurnRepository(session)
            total_raw = await repo.get_total_amount_raw()
            min_ts, max_ts, count = await repo.get_timestamp_bounds()
            top = await repo.get_top_initiators(limit=3)
            unique_initiators = await repo.get_unique_initiator_count()

        average_interval = None
        if count > 1 and min_ts is not None and max_ts is not None:
            average_interval = (max_ts - min_ts) / (count - 1)

        return BurnStats(
            total_amount_raw=total_raw,
            burn_count=count,
            last_burn_timestamp=max_ts,
            top_initiators=[
                TopInitiator(address=address, transaction_count=tx_count)
                for address, tx_count in top
            ],
            unique_initiator_count=unique_initiators,
            average_interval_seconds=average_interval,
        )

    async def recent_burns(self, limit: int = 20) -> list[Burn]:
        """Get the most recent burns, newest first."""
        async with self.session_maker() as session:
            return await BurnRepository(session).get_recent(limit)

    async def close(self) -> None:
        """Dispose the engine's connection pool."""
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("[Database] Connection closed")
