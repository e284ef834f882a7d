"""
Checkpointed scanner.

One poll cycle of the live burn monitor: derive the block range from the
stored checkpoint, fetch and reconcile both sinks, alert and persist in
ascending block order, and advance the checkpoint only over blocks that
were fully handled.
"""

import asyncio
from collections.abc import Callable
from itertools import groupby

from loguru import logger

from app.config.settings import Settings
from app.services.blockchain.constants import TRANSFER_EVENT
from app.services.burn_monitor.enrichment import TransactionEnricher
from app.services.burn_monitor.fetcher import ChunkedLogFetcher
from app.services.burn_monitor.protocols import (
    CheckpointStore,
    Enricher,
    LogSource,
    Notifier,
)
from app.services.burn_monitor.reconciler import EventReconciler
from app.services.burn_monitor.types import (
    BurnEvent,
    EnrichmentFailure,
    ScanResult,
)


class CheckpointedScanner:
    """
    Incremental scanner over the Firepit and 0xdead sinks.

    The checkpoint is re-read every cycle and never moves backward. It
    only passes a block once every burn in that block and every block
    before it (within the cycle) was delivered, suppressed or already
    recorded. Delivery is at-least-once: a crash between delivery and
    persistence re-sends that alert on the next run.
    """

    def __init__(
        self,
        log_source: LogSource,
        store: CheckpointStore,
        notifier: Notifier,
        settings: Settings,
        enrich: Enricher | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> None:
        """
        Initialize scanner.

        Args:
            log_source: Chain provider
            store: Checkpoint and dedup store
            notifier: Burn alert delivery
            settings: Token, sink and range settings
            enrich: Tx metadata resolver (defaults to TransactionEnricher)
            should_stop: Checked between block groups
        """
        self.log_source = log_source
        self.store = store
        self.notifier = notifier
        self.settings = settings
        self.enrich = enrich or TransactionEnricher(log_source)
        self.should_stop = should_stop or (lambda: False)

        self.fetcher = ChunkedLogFetcher(
            log_source, concurrency=settings.fetch_concurrency
        )
        self.reconciler = EventReconciler(
            settings.token_decimals, concurrency=settings.enrich_concurrency
        )

    async def scan_once(self) -> ScanResult:
        """
        Run one poll cycle.

        Returns:
            ScanResult for the cycle

        Raises:
            FetchError: A getLogs sub-range failed (checkpoint untouched)
            Exception: Store and provider errors propagate to the loop
        """
        start_checkpoint = await self.store.get_checkpoint()
        head = await self.log_source.current_head()

        if start_checkpoint is None:
            from_block = max(0, head - self.settings.initial_lookback_blocks)
            logger.info(f"[Scanner] First run, starting from block {from_block}")
        else:
            from_block = start_checkpoint + 1
        to_block = head

        result = ScanResult(
            from_block=from_block, to_block=to_block, checkpoint=start_checkpoint
        )

        if from_block > to_block:
            await self._advance(result, to_block)
            return result

        firepit_logs, dead_logs = await asyncio.gather(
            self._fetch(self.settings.firepit_address, from_block, to_block, "Firepit"),
            self._fetch(self.settings.burn_address, from_block, to_block, "0xdead"),
        )
        reconciled = await self.reconciler.reconcile(
            firepit_logs, dead_logs, self.enrich
        )

        items: list[BurnEvent | EnrichmentFailure] = sorted(
            [*reconciled.events, *reconciled.failures],
            key=lambda item: item.block_number,
        )
        result.discovered = len(items)
        if items:
            logger.info(
                f"[Scanner] Found {len(items)} burn(s) in blocks "
                f"{from_block}-{to_block}"
            )

        contiguous = True
        for block_number, group in groupby(items, key=lambda item: item.block_number):
            if self.should_stop():
                logger.info(f"[Scanner] Stop requested before block {block_number}")
                result.interrupted = True
                break

            group_ok = True
            for item in group:
                if isinstance(item, EnrichmentFailure):
                    result.failed += 1
                    group_ok = False
                    logger.warning(
                        f"[Scanner] Could not enrich {item.tx_hash} at block "
                        f"{item.block_number}: {item.error}"
                    )
                    continue
                if not await self._handle_event(item, result):
                    group_ok = False

            if not contiguous:
                continue
            if group_ok:
                await self._advance(result, block_number)
            else:
                # Hold the checkpoint just before the failed block
                contiguous = False
                await self._advance(result, block_number - 1)

        if contiguous and not result.interrupted:
            await self._advance(result, to_block)

        logger.info(
            f"[Scanner] Cycle {from_block}-{to_block}: delivered={result.delivered} "
            f"suppressed={result.suppressed} skipped={result.skipped} "
            f"failed={result.failed} checkpoint={result.checkpoint}"
        )
        return result

    async def _fetch(
        self, sink: str, from_block: int, to_block: int, label: str
    ) -> list:
        return await self.fetcher.fetch(
            self.settings.token_address,
            TRANSFER_EVENT,
            {"to": sink},
            from_block,
            to_block,
            self.settings.max_blocks_per_query,
            label=label,
        )

    async def _handle_event(self, event: BurnEvent, result: ScanResult) -> bool:
        """Deliver and persist one burn. Returns False if it must be retried."""
        if await self.store.has_record(event.tx_hash):
            logger.debug(f"[Scanner] Skipping already notified burn: {event.tx_hash}")
            result.skipped += 1
            return True

        if event.amount_raw < self.settings.amount_threshold:
            await self.store.insert_record(event)
            result.suppressed += 1
            logger.info(
                f"[Scanner] Recorded {event.amount_formatted} "
                f"{self.settings.token_symbol} below alert threshold: {event.tx_hash}"
            )
            return True

        if not await self.notifier.notify(event):
            result.failed += 1
            logger.warning(
                f"[Scanner] Alert failed for {event.tx_hash} at block "
                f"{event.block_number}, will retry next cycle"
            )
            return False

        await self.store.insert_record(event)
        result.delivered += 1
        logger.info(f"[Scanner] Sent alert for burn: {event.tx_hash}")
        return True

    async def _advance(self, result: ScanResult, block_number: int) -> None:
        """Move the checkpoint forward, never backward."""
        if block_number < 0:
            return
        if result.checkpoint is not None and block_number <= result.checkpoint:
            return
        await self.store.set_checkpoint(block_number)
        result.checkpoint = block_number
