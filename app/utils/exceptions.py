"""
Exception handling utilities.

Defines the burn monitor's typed failures and groups library exceptions
by handling strategy.
"""

from sqlalchemy.exc import OperationalError
from web3.exceptions import Web3Exception


class BurnMonitorError(Exception):
    """Base class for burn monitor failures."""


class ConfigurationError(BurnMonitorError):
    """Raised when the process cannot start (settings, unreachable services)."""


class FetchError(BurnMonitorError):
    """A getLogs sub-range failed. None of its logs were kept."""

    def __init__(
        self,
        from_block: int,
        to_block: int,
        label: str = "",
        cause: BaseException | None = None,
    ) -> None:
        self.from_block = from_block
        self.to_block = to_block
        self.label = label
        self.cause = cause
        target = f" ({label})" if label else ""
        super().__init__(
            f"Failed to fetch logs{target} for blocks "
            f"{from_block}-{to_block}: {cause}"
        )


class EnrichmentError(BurnMonitorError):
    """Transaction, receipt or block lookup failed for one burn."""

    def __init__(
        self,
        tx_hash: str,
        block_number: int,
        cause: BaseException | None = None,
    ) -> None:
        self.tx_hash = tx_hash
        self.block_number = block_number
        self.cause = cause
        super().__init__(
            f"Failed to enrich tx {tx_hash} at block {block_number}: {cause}"
        )


class BackfillError(BurnMonitorError):
    """A backfill chunk failed twice in a row."""

    def __init__(
        self,
        from_block: int,
        to_block: int,
        cause: BaseException | None = None,
    ) -> None:
        self.from_block = from_block
        self.to_block = to_block
        self.cause = cause
        super().__init__(
            f"Backfill aborted at blocks {from_block}-{to_block} "
            f"after retry: {cause}"
        )


# Exception categories based on handling strategy

# Retried on the next poll cycle, never fatal to the live scanner
TRANSIENT_ERRORS = (
    FetchError,
    EnrichmentError,
    OperationalError,  # Database connectivity
    Web3Exception,     # Blockchain RPC errors
    TimeoutError,
    ConnectionError,
)


def is_transient(exc: BaseException) -> bool:
    """
    Check if exception is a transient I/O failure.

    Args:
        exc: Exception to check

    Returns:
        True if the next cycle should simply try again
    """
    return isinstance(exc, TRANSIENT_ERRORS)
