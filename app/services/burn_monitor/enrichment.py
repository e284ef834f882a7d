"""
Transaction enrichment.

Resolves the signer, gas cost and block timestamp of a burn transaction.
"""

import asyncio
from collections import OrderedDict

from loguru import logger

from app.services.burn_monitor.protocols import LogSource
from app.services.burn_monitor.types import TxDetails
from app.utils.exceptions import EnrichmentError

# Blocks whose timestamps are kept, least recently used evicted first
BLOCK_TIMESTAMP_CACHE_SIZE = 4096


class TransactionEnricher:
    """
    Enrich callable over a log source.

    Block timestamps are memoized in a bounded LRU since several burns
    often share a block.
    """

    def __init__(
        self,
        log_source: LogSource,
        cache_size: int = BLOCK_TIMESTAMP_CACHE_SIZE,
    ) -> None:
        if cache_size < 1:
            raise ValueError("cache_size must be >= 1")
        self.log_source = log_source
        self.cache_size = cache_size
        self._block_timestamps: OrderedDict[int, int] = OrderedDict()

    async def __call__(self, tx_hash: str, block_number: int) -> TxDetails:
        return await self.enrich(tx_hash, block_number)

    async def enrich(self, tx_hash: str, block_number: int) -> TxDetails:
        """
        Resolve transaction-level metadata.

        Args:
            tx_hash: Transaction hash
            block_number: Block containing the transaction

        Returns:
            TxDetails with initiator, timestamp and gas fields

        Raises:
            EnrichmentError: If any lookup fails
        """
        try:
            tx, receipt, timestamp = await asyncio.gather(
                self.log_source.get_transaction(tx_hash),
                self.log_source.get_transaction_receipt(tx_hash),
                self._get_block_timestamp(block_number),
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(
                f"[Enricher] Lookup failed for {tx_hash} at block {block_number}: {e}"
            )
            raise EnrichmentError(tx_hash, block_number, e) from e

        initiator = tx.get("from")
        if not initiator:
            raise EnrichmentError(
                tx_hash, block_number, ValueError("transaction has no sender")
            )

        gas_used = receipt.get("gasUsed")
        gas_price = tx.get("gasPrice")
        if gas_price is None:
            gas_price = receipt.get("effectiveGasPrice")

        return TxDetails(
            initiator=str(initiator).lower(),
            timestamp=timestamp,
            gas_used=str(int(gas_used)) if gas_used is not None else None,
            gas_price=str(int(gas_price)) if gas_price is not None else None,
        )

    async def _get_block_timestamp(self, block_number: int) -> int:
        cached = self._block_timestamps.get(block_number)
        if cached is not None:
            self._block_timestamps.move_to_end(block_number)
            return cached
        block = await self.log_source.get_block(block_number)
        timestamp = int(block["timestamp"])
        self._block_timestamps[block_number] = timestamp
        while len(self._block_timestamps) > self.cache_size:
            self._block_timestamps.popitem(last=False)
        return timestamp
