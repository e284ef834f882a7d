#!/usr/bin/env python3
"""Print burn statistics and the most recent burns."""

import argparse
import asyncio
import sys
from datetime import UTC, datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config.database import create_engine, create_session_maker  # noqa: E402
from app.config.settings import get_settings  # noqa: E402
from app.services.burn_store import BurnStore  # noqa: E402
from app.utils.formatters import (  # noqa: E402
    format_token_amount,
    format_units,
    short_address,
)


def _format_time(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


async def view_history(limit: int) -> None:
    settings = get_settings()
    symbol = settings.token_symbol
    engine = create_engine(settings)
    store = BurnStore(create_session_maker(engine), engine)

    try:
        print("=" * 50)
        print(f"{symbol} Burn History")
        print("=" * 50)

        stats = await store.aggregate_stats()
        total = format_units(stats.total_amount_raw, settings.token_decimals)
        print(f"\nTotal Burned: {total} {symbol}")
        print(f"Total Burns: {stats.burn_count}")
        if stats.last_burn_timestamp:
            print(f"Last Burn: {_format_time(stats.last_burn_timestamp)}")

        print("\n" + "-" * 50)
        print("Recent Burns:")
        print("-" * 50)

        burns = await store.recent_burns(limit)
        if not burns:
            print("No burns recorded yet.")
            return

        for burn in burns:
            print(f"\n{_format_time(burn.timestamp)}")
            print(f"  Amount: {format_token_amount(burn.amount, places=2)} {symbol}")
            print(f"  Burner: {short_address(burn.initiator)}")
            print(f"  Destination: {burn.destination}")
            print(f"  Tx: {settings.explorer_url}/tx/{burn.tx_hash}")
    finally:
        await store.close()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="View recorded burns")
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of recent burns to show",
    )
    args = parser.parse_args()

    asyncio.run(view_history(args.limit))


if __name__ == "__main__":
    main()
