"""
Burn monitor.

Chunked log fetching, reconciliation of the two burn sinks, the
checkpointed live scanner and the historical backfill.
"""

from app.services.burn_monitor.backfill import BackfillRunner
from app.services.burn_monitor.enrichment import TransactionEnricher
from app.services.burn_monitor.fetcher import ChunkedLogFetcher, split_block_range
from app.services.burn_monitor.reconciler import EventReconciler
from app.services.burn_monitor.scanner import CheckpointedScanner
from app.services.burn_monitor.types import (
    BackfillSummary,
    BurnDestination,
    BurnEvent,
    BurnStats,
    EnrichmentFailure,
    ReconcileResult,
    ScanResult,
    TopInitiator,
    TxDetails,
)

__all__ = [
    "BackfillRunner",
    "BackfillSummary",
    "BurnDestination",
    "BurnEvent",
    "BurnStats",
    "ChunkedLogFetcher",
    "CheckpointedScanner",
    "EnrichmentFailure",
    "EventReconciler",
    "ReconcileResult",
    "ScanResult",
    "TopInitiator",
    "TransactionEnricher",
    "TxDetails",
    "split_block_range",
]
