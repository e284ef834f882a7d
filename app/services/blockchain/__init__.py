"""
Blockchain services module.

Provides the log source used by the burn monitor: range-bounded event
queries plus transaction, receipt and block lookups.
"""

from .async_executor import AsyncBlockchainExecutor
from .constants import ERC20_ABI, TRANSFER_EVENT
from .log_source import Web3LogSource


__all__ = [
    "AsyncBlockchainExecutor",
    "Web3LogSource",
    "ERC20_ABI",
    "TRANSFER_EVENT",
]
