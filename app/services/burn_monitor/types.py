"""
Burn monitor data types.

DTOs passed between the fetcher, reconciler, scanner, backfill and
notification layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class BurnDestination(StrEnum):
    """Burn sink that received the transfer."""

    FIREPIT = "firepit"
    DEAD = "dead"


# Raw decoded log as returned by the log source:
# transactionHash, blockNumber, logIndex, args{from, to, value}
RawLog = dict[str, Any]


@dataclass(frozen=True)
class TxDetails:
    """Transaction-level metadata resolved during enrichment."""
    initiator: str
    timestamp: int
    gas_used: str | None = None
    gas_price: str | None = None


@dataclass(frozen=True)
class BurnEvent:
    """A single burn, one per transaction."""
    tx_hash: str
    block_number: int
    timestamp: int
    amount_raw: int
    amount_formatted: str
    initiator: str
    transfer_from: str
    destination: BurnDestination
    gas_used: str | None = None
    gas_price: str | None = None


@dataclass(frozen=True)
class EnrichmentFailure:
    """A burn that could not be enriched; its block must be retried."""
    tx_hash: str
    block_number: int
    error: BaseException


@dataclass
class ReconcileResult:
    """Output of reconciliation, both lists ordered by block."""
    events: list[BurnEvent] = field(default_factory=list)
    failures: list[EnrichmentFailure] = field(default_factory=list)


@dataclass(frozen=True)
class TopInitiator:
    """Address with its burn count."""
    address: str
    transaction_count: int


@dataclass
class BurnStats:
    """Aggregate statistics over all recorded burns."""
    total_amount_raw: int
    burn_count: int
    last_burn_timestamp: int | None
    top_initiators: list[TopInitiator] = field(default_factory=list)
    unique_initiator_count: int = 0
    average_interval_seconds: float | None = None


@dataclass
class ScanResult:
    """Outcome of one poll cycle."""
    from_block: int
    to_block: int
    discovered: int = 0
    delivered: int = 0
    suppressed: int = 0
    skipped: int = 0
    failed: int = 0
    checkpoint: int | None = None
    interrupted: bool = False

    @property
    def complete(self) -> bool:
        """Every event in the range was handled."""
        return self.failed == 0 and not self.interrupted


@dataclass
class BackfillSummary:
    """Outcome of a backfill run."""
    from_block: int
    to_block: int
    firepit_logs: int = 0
    dead_logs: int = 0
    discovered: int = 0
    saved: int = 0
    skipped: int = 0
    chunks: int = 0
