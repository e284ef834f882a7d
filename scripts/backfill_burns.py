#!/usr/bin/env python3
"""
Burn Backfill Script.

Imports every historical burn from the Firepit deployment block to the
current block. Silent: burns are saved but no alerts are sent.

Safe to re-run: burns already in the database are counted as skipped.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger  # noqa: E402

from app.config.database import create_engine, create_session_maker  # noqa: E402
from app.config.settings import get_settings  # noqa: E402
from app.services.blockchain.log_source import Web3LogSource  # noqa: E402
from app.services.burn_monitor.backfill import BackfillRunner  # noqa: E402
from app.services.burn_store import BurnStore  # noqa: E402
from app.utils.exceptions import BackfillError  # noqa: E402
from app.utils.formatters import format_units  # noqa: E402
from bot.initialization.logging import setup_logging  # noqa: E402


async def backfill_burns(
    from_block: int | None,
    chunk_blocks: int | None,
    delay_ms: int | None,
) -> None:
    """Run the backfill and print a summary."""
    settings = get_settings()
    engine = create_engine(settings)
    store = BurnStore(create_session_maker(engine), engine)
    log_source = Web3LogSource.from_settings(settings)

    try:
        runner = BackfillRunner(
            log_source,
            store,
            settings,
            from_block=from_block,
            chunk_blocks=chunk_blocks,
            delay_ms=delay_ms,
        )
        summary = await runner.run()

        print("\n=== Backfill Complete ===")
        print(f"Blocks scanned: {summary.from_block}-{summary.to_block}")
        print(f"Total Firepit burns found: {summary.firepit_logs}")
        print(f"Total dead address burns found: {summary.dead_logs}")
        print(f"Burns discovered: {summary.discovered}")
        print(f"Burns saved to database: {summary.saved}")
        print(f"Burns skipped (already existed): {summary.skipped}")

        stats = await store.aggregate_stats()
        total = format_units(stats.total_amount_raw, settings.token_decimals)
        print("\n=== Database Statistics ===")
        print(f"Total burns in database: {stats.burn_count}")
        print(f"Total {settings.token_symbol} burned: {total}")
    finally:
        await log_source.close()
        await store.close()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Backfill historical burns into the database"
    )
    parser.add_argument(
        "--from-block",
        type=int,
        default=None,
        help="First block to scan (default: Firepit deployment block)",
    )
    parser.add_argument(
        "--chunk-blocks",
        type=int,
        default=None,
        help="Blocks per getLogs request (default: BACKFILL_CHUNK_BLOCKS)",
    )
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Pause between chunks in milliseconds",
    )
    args = parser.parse_args()

    setup_logging(log_file=None)
    logger.info("=== Burn Backfill Script ===")

    try:
        asyncio.run(
            backfill_burns(args.from_block, args.chunk_blocks, args.delay_ms)
        )
    except BackfillError as e:
        logger.error(f"[Backfill] Backfill failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
