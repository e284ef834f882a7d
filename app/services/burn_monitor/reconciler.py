"""
Event reconciler.

Merges Firepit and 0xdead transfer logs into one burn per transaction
and enriches each burn with transaction metadata.
"""

import asyncio
from typing import Any

from loguru import logger

from app.services.burn_monitor.protocols import Enricher
from app.services.burn_monitor.types import (
    BurnDestination,
    BurnEvent,
    EnrichmentFailure,
    RawLog,
    ReconcileResult,
)
from app.utils.formatters import format_units


def _is_well_formed(log: RawLog) -> bool:
    args: dict[str, Any] = log.get("args") or {}
    try:
        value = int(args["value"])
    except (KeyError, TypeError, ValueError):
        return False
    return (
        value != 0
        and bool(args.get("from"))
        and bool(log.get("transactionHash"))
        and log.get("blockNumber") is not None
    )


class EventReconciler:
    """
    Builds BurnEvents from the two per-sink log streams.

    A transaction that transfers to both sinks is kept once, under the
    sink whose logs were registered first (Firepit).
    """

    def __init__(self, token_decimals: int, concurrency: int = 4) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.token_decimals = token_decimals
        self.concurrency = concurrency

    def collect(
        self, firepit_logs: list[RawLog], dead_logs: list[RawLog]
    ) -> list[tuple[RawLog, BurnDestination]]:
        """
        Map logs to one (log, destination) entry per transaction.

        Malformed logs are dropped after the mapping is built, so a
        malformed Firepit log still claims its transaction.

        Returns:
            Entries in registration order
        """
        by_tx: dict[str, tuple[RawLog, BurnDestination]] = {}
        for logs, destination in (
            (firepit_logs, BurnDestination.FIREPIT),
            (dead_logs, BurnDestination.DEAD),
        ):
            for log in logs:
                tx_hash = str(log.get("transactionHash") or "").lower()
                if tx_hash not in by_tx:
                    by_tx[tx_hash] = (log, destination)

        entries = []
        for log, destination in by_tx.values():
            if _is_well_formed(log):
                entries.append((log, destination))
            else:
                logger.debug(
                    f"[Reconciler] Dropping malformed log: "
                    f"{log.get('transactionHash')}"
                )
        return entries

    async def reconcile(
        self,
        firepit_logs: list[RawLog],
        dead_logs: list[RawLog],
        enrich: Enricher,
    ) -> ReconcileResult:
        """
        Reconcile both streams and enrich the surviving entries.

        Args:
            firepit_logs: Transfer logs to the Firepit (registered first)
            dead_logs: Transfer logs to the 0xdead address
            enrich: Resolves TxDetails for (tx_hash, block_number)

        Returns:
            ReconcileResult with events and enrichment failures, both
            stably sorted by block number
        """
        entries = self.collect(firepit_logs, dead_logs)
        if not entries:
            return ReconcileResult()

        semaphore = asyncio.Semaphore(self.concurrency)

        async def build(
            log: RawLog, destination: BurnDestination
        ) -> BurnEvent | EnrichmentFailure:
            tx_hash = str(log["transactionHash"]).lower()
            block_number = int(log["blockNumber"])
            try:
                async with semaphore:
                    details = await enrich(tx_hash, block_number)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                return EnrichmentFailure(tx_hash, block_number, e)

            amount_raw = int(log["args"]["value"])
            return BurnEvent(
                tx_hash=tx_hash,
                block_number=block_number,
                timestamp=details.timestamp,
                amount_raw=amount_raw,
                amount_formatted=format_units(amount_raw, self.token_decimals),
                initiator=details.initiator,
                transfer_from=str(log["args"]["from"]).lower(),
                destination=destination,
                gas_used=details.gas_used,
                gas_price=details.gas_price,
            )

        built = await asyncio.gather(
            *(build(log, destination) for log, destination in entries)
        )

        result = ReconcileResult()
        for item in built:
            if isinstance(item, EnrichmentFailure):
                result.failures.append(item)
            else:
                result.events.append(item)

        # sort() is stable, ties keep registration order
        result.events.sort(key=lambda event: event.block_number)
        result.failures.sort(key=lambda failure: failure.block_number)

        if result.failures:
            logger.warning(
                f"[Reconciler] {len(result.failures)} burn(s) could not be enriched"
            )
        return result
