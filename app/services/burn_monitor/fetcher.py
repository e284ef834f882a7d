"""
Chunked log fetcher.

Splits a block range into provider-compliant sub-ranges and queries
them in order, sequentially or with bounded concurrency.
"""

import asyncio
from typing import Any

from loguru import logger

from app.services.burn_monitor.protocols import LogSource
from app.services.burn_monitor.types import RawLog
from app.utils.exceptions import FetchError


def split_block_range(
    from_block: int, to_block: int, max_blocks_per_query: int
) -> list[tuple[int, int]]:
    """
    Partition an inclusive range into consecutive sub-ranges.

    Each sub-range satisfies ``end - start <= max_blocks_per_query``;
    the last one is clipped to ``to_block``.

    Args:
        from_block: First block (inclusive)
        to_block: Last block (inclusive)
        max_blocks_per_query: Provider limit on ``to_block - from_block``

    Returns:
        List of (start, end) pairs, empty when from_block > to_block
    """
    if max_blocks_per_query < 0:
        raise ValueError("max_blocks_per_query must be >= 0")

    ranges: list[tuple[int, int]] = []
    start = from_block
    while start <= to_block:
        end = min(start + max_blocks_per_query, to_block)
        ranges.append((start, end))
        start = end + 1
    return ranges


class ChunkedLogFetcher:
    """Fetches event logs over arbitrary block ranges."""

    def __init__(self, log_source: LogSource, concurrency: int = 1) -> None:
        """
        Initialize fetcher.

        Args:
            log_source: Provider to query
            concurrency: Max sub-range requests in flight
        """
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.log_source = log_source
        self.concurrency = concurrency

    async def fetch(
        self,
        address: str,
        event_name: str,
        match_args: dict[str, Any],
        from_block: int,
        to_block: int,
        max_blocks_per_query: int,
        label: str = "",
    ) -> list[RawLog]:
        """
        Fetch logs for ``[from_block, to_block]``.

        Results keep provider order across sub-ranges. A failed sub-range
        raises FetchError and none of its logs are returned.

        Args:
            address: Contract emitting the event
            event_name: ABI event name
            match_args: Indexed argument filters
            from_block: First block (inclusive)
            to_block: Last block (inclusive)
            max_blocks_per_query: Provider limit on ``to_block - from_block``
            label: Name used in logs and errors (e.g. "Firepit")

        Returns:
            Concatenated logs of all sub-ranges
        """
        ranges = split_block_range(from_block, to_block, max_blocks_per_query)
        if not ranges:
            return []

        if self.concurrency == 1 or len(ranges) == 1:
            logs: list[RawLog] = []
            for start, end in ranges:
                logs.extend(
                    await self._fetch_range(
                        address, event_name, match_args, start, end, label
                    )
                )
            return logs

        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(start: int, end: int) -> list[RawLog]:
            async with semaphore:
                return await self._fetch_range(
                    address, event_name, match_args, start, end, label
                )

        results = await asyncio.gather(
            *(bounded(start, end) for start, end in ranges),
            return_exceptions=True,
        )

        logs = []
        for result in results:
            # Lowest failed sub-range wins
            if isinstance(result, BaseException):
                raise result
            logs.extend(result)
        return logs

    async def _fetch_range(
        self,
        address: str,
        event_name: str,
        match_args: dict[str, Any],
        start: int,
        end: int,
        label: str,
    ) -> list[RawLog]:
        logger.debug(f"[Fetcher] Fetching {label} logs from block {start} to {end}")
        try:
            return list(
                await self.log_source.get_logs(
                    address, event_name, match_args, start, end
                )
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise FetchError(start, end, label, e) from e
