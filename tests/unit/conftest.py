"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Settings with small block ranges and no backfill pauses
- Aggregate stats for formatter tests
"""

import pytest

from app.config.settings import Settings
from app.services.burn_monitor.types import BurnStats, TopInitiator
from burn_fakes import DEAD, FIREPIT, TOKEN, UNIT


@pytest.fixture
def settings():
    """
    Settings tuned for tests.

    - max_blocks_per_query: 9 (ten-block sub-ranges)
    - initial_lookback_blocks: 600
    - amount_threshold: 4,000 tokens
    - backfill from block 100 in 10-block chunks, no delays
    """
    return Settings(
        token_address=TOKEN,
        firepit_address=FIREPIT,
        burn_address=DEAD,
        amount_threshold=4_000 * UNIT,
        initial_lookback_blocks=600,
        max_blocks_per_query=9,
        backfill_deployment_block=100,
        backfill_chunk_blocks=10,
        backfill_chunk_delay_ms=0,
        backfill_retry_delay_seconds=0,
        site_url="https://tokenjar.xyz",
        explorer_url="https://etherscan.io",
    )


@pytest.fixture
def sample_stats():
    """Aggregate stats with two initiators."""
    return BurnStats(
        total_amount_raw=12_345_600 * UNIT,
        burn_count=3,
        last_burn_timestamp=1_700_000_000,
        top_initiators=[
            TopInitiator("0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa", 2),
            TopInitiator("0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb", 1),
        ],
        unique_initiator_count=2,
        average_interval_seconds=3_723,
    )
