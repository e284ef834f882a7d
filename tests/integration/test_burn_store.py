"""
Integration tests for BurnStore.

Runs the real repositories against an in-memory SQLite database.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.config.database import create_session_maker
from app.models import Base
from app.services.burn_monitor.types import BurnDestination, BurnEvent
from app.services.burn_store import BurnStore

UNIT = 10**18

ALICE = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
BOB = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"


def make_event(
    n: int,
    block: int,
    timestamp: int,
    amount_raw: int = 4_000 * UNIT,
    initiator: str = ALICE,
) -> BurnEvent:
    return BurnEvent(
        tx_hash="0x" + f"{n:064x}",
        block_number=block,
        timestamp=timestamp,
        amount_raw=amount_raw,
        amount_formatted=str(amount_raw // UNIT),
        initiator=initiator,
        transfer_from=initiator,
        destination=BurnDestination.FIREPIT,
        gas_used="65000",
        gas_price="20000000000",
    )


@pytest_asyncio.fixture
async def store():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    burn_store = BurnStore(create_session_maker(engine), engine)
    yield burn_store
    await burn_store.close()


class TestBurnStore:
    """Integration tests for BurnStore."""

    @pytest.mark.asyncio
    async def test_ping(self, store):
        await store.ping()

    @pytest.mark.asyncio
    async def test_insert_is_idempotent(self, store):
        """Second insert of a hash is a silent no-op; first content wins."""
        first = make_event(1, block=100, timestamp=1_000, amount_raw=5_000 * UNIT)
        duplicate = make_event(1, block=200, timestamp=2_000, amount_raw=9 * UNIT)

        assert await store.insert_record(first) is True
        assert await store.insert_record(duplicate) is False

        burns = await store.recent_burns()
        assert len(burns) == 1
        assert burns[0].block_number == 100
        assert burns[0].amount_raw == str(5_000 * UNIT)
        assert burns[0].notified_at is not None

    @pytest.mark.asyncio
    async def test_has_record_ignores_hash_case(self, store):
        event = make_event(0xABC, block=100, timestamp=1_000)
        await store.insert_record(event)

        assert await store.has_record(event.tx_hash)
        assert await store.has_record(event.tx_hash.upper().replace("0X", "0x"))
        assert not await store.has_record("0x" + "f" * 64)

    @pytest.mark.asyncio
    async def test_checkpoint_absent_on_first_run(self, store):
        assert await store.get_checkpoint() is None

    @pytest.mark.asyncio
    async def test_checkpoint_upsert(self, store):
        await store.set_checkpoint(24_100_000)
        await store.set_checkpoint(24_100_050)

        assert await store.get_checkpoint() == 24_100_050

    @pytest.mark.asyncio
    async def test_aggregate_stats(self, store):
        await store.insert_record(make_event(1, 100, 1_000, 4_000 * UNIT, ALICE))
        await store.insert_record(make_event(2, 110, 1_600, 6_000 * UNIT, BOB))
        await store.insert_record(make_event(3, 120, 2_200, 5_000 * UNIT + 1, ALICE))

        stats = await store.aggregate_stats()

        assert stats.total_amount_raw == 15_000 * UNIT + 1
        assert stats.burn_count == 3
        assert stats.last_burn_timestamp == 2_200
        assert stats.unique_initiator_count == 2
        assert stats.average_interval_seconds == 600
        assert [(t.address, t.transaction_count) for t in stats.top_initiators] == [
            (ALICE, 2),
            (BOB, 1),
        ]

    @pytest.mark.asyncio
    async def test_aggregate_stats_empty(self, store):
        stats = await store.aggregate_stats()

        assert stats.total_amount_raw == 0
        assert stats.burn_count == 0
        assert stats.last_burn_timestamp is None
        assert stats.average_interval_seconds is None
        assert stats.top_initiators == []

    @pytest.mark.asyncio
    async def test_recent_burns_newest_first(self, store):
        for n in range(5):
            await store.insert_record(make_event(n, 100 + n, 1_000 + n))

        burns = await store.recent_burns(limit=3)

        assert [b.timestamp for b in burns] == [1_004, 1_003, 1_002]
