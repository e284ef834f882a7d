"""
Backfill runner.

One-shot historical import of burns from the Firepit deployment block to
the current head. Silent: records are saved, alerts are never sent.
"""

import asyncio

from loguru import logger

from app.config.settings import Settings
from app.services.blockchain.constants import TRANSFER_EVENT
from app.services.burn_monitor.enrichment import TransactionEnricher
from app.services.burn_monitor.fetcher import ChunkedLogFetcher
from app.services.burn_monitor.protocols import CheckpointStore, Enricher, LogSource
from app.services.burn_monitor.reconciler import EventReconciler
from app.services.burn_monitor.types import BackfillSummary, RawLog
from app.utils.exceptions import BackfillError


class BackfillRunner:
    """
    Walks ``[from_block, head]`` in small paced chunks.

    A failed chunk is retried once after a backoff; a second failure
    aborts the run with BackfillError. Re-running is safe because inserts
    are idempotent: already stored burns are counted as skipped.
    """

    def __init__(
        self,
        log_source: LogSource,
        store: CheckpointStore,
        settings: Settings,
        from_block: int | None = None,
        chunk_blocks: int | None = None,
        delay_ms: int | None = None,
        enrich: Enricher | None = None,
    ) -> None:
        self.log_source = log_source
        self.store = store
        self.settings = settings
        self.from_block = (
            from_block if from_block is not None
            else settings.backfill_deployment_block
        )
        self.chunk_blocks = (
            chunk_blocks if chunk_blocks is not None
            else settings.backfill_chunk_blocks
        )
        self.delay_ms = (
            delay_ms if delay_ms is not None
            else settings.backfill_chunk_delay_ms
        )
        self.retry_delay = settings.backfill_retry_delay_seconds
        self.enrich = enrich or TransactionEnricher(log_source)

        if self.chunk_blocks < 1:
            raise ValueError("chunk_blocks must be >= 1")

        self.fetcher = ChunkedLogFetcher(log_source)
        self.reconciler = EventReconciler(
            settings.token_decimals, concurrency=settings.enrich_concurrency
        )

    async def run(self) -> BackfillSummary:
        """
        Run the backfill to the current head.

        Returns:
            BackfillSummary with per-sink log counts and save results

        Raises:
            BackfillError: A chunk failed twice in a row
        """
        head = await self.log_source.current_head()
        summary = BackfillSummary(from_block=self.from_block, to_block=head)

        total_blocks = max(1, head - self.from_block + 1)
        logger.info(
            f"[Backfill] Scanning blocks {self.from_block}-{head} "
            f"({total_blocks} blocks, {self.chunk_blocks} per chunk)"
        )

        start = self.from_block
        while start <= head:
            end = min(start + self.chunk_blocks - 1, head)
            progress = (start - self.from_block) / total_blocks * 100
            logger.info(f"[Backfill] [{progress:.1f}%] Scanning blocks {start} to {end}")

            counted_hashes: set[str] = set()
            try:
                await self._process_chunk(start, end, summary, counted_hashes)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(
                    f"[Backfill] Error processing blocks {start}-{end}: {e}, "
                    f"retrying in {self.retry_delay}s"
                )
                await asyncio.sleep(self.retry_delay)
                try:
                    await self._process_chunk(start, end, summary, counted_hashes)
                except asyncio.CancelledError:
                    raise
                except Exception as retry_error:
                    logger.error(
                        f"[Backfill] Blocks {start}-{end} failed again: {retry_error}"
                    )
                    raise BackfillError(start, end, retry_error) from retry_error

            summary.chunks += 1
            start = end + 1
            if start <= head and self.delay_ms:
                await asyncio.sleep(self.delay_ms / 1000)

        logger.success(
            f"[Backfill] Complete: firepit_logs={summary.firepit_logs} "
            f"dead_logs={summary.dead_logs} saved={summary.saved} "
            f"skipped={summary.skipped}"
        )
        return summary

    async def _process_chunk(
        self,
        start: int,
        end: int,
        summary: BackfillSummary,
        counted_hashes: set[str],
    ) -> None:
        """
        Fetch, reconcile and save one chunk.

        Save results are counted as each insert commits, once per hash:
        an event handled by an earlier attempt at the same chunk is not
        counted again.
        Log and discovery counts apply only when the chunk succeeds.
        """
        firepit_logs = await self._fetch(self.settings.firepit_address, start, end, "Firepit")
        dead_logs = await self._fetch(self.settings.burn_address, start, end, "0xdead")

        reconciled = await self.reconciler.reconcile(
            firepit_logs, dead_logs, self.enrich
        )
        if reconciled.failures:
            first = reconciled.failures[0]
            raise first.error

        for event in reconciled.events:
            inserted = await self.store.insert_record(event)
            if event.tx_hash in counted_hashes:
                continue
            counted_hashes.add(event.tx_hash)
            if inserted:
                summary.saved += 1
                logger.info(
                    f"[Backfill] Saved: {event.amount_formatted} "
                    f"{self.settings.token_symbol} to {event.destination} "
                    f"in tx {event.tx_hash[:10]}..."
                )
            else:
                summary.skipped += 1

        if firepit_logs:
            logger.info(f"[Backfill] Found {len(firepit_logs)} Firepit transfers")
        if dead_logs:
            logger.info(f"[Backfill] Found {len(dead_logs)} dead address transfers")

        summary.firepit_logs += len(firepit_logs)
        summary.dead_logs += len(dead_logs)
        summary.discovered += len(reconciled.events)

    async def _fetch(
        self, sink: str, start: int, end: int, label: str
    ) -> list[RawLog]:
        return await self.fetcher.fetch(
            self.settings.token_address,
            TRANSFER_EVENT,
            {"to": sink},
            start,
            end,
            self.chunk_blocks - 1,
            label=label,
        )
