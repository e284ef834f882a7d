"""
Collaborator ports used by the burn monitor.

The scanner and backfill depend on these protocols only, so tests can
hand in fakes and production wires in web3, SQLAlchemy and aiogram.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from app.services.burn_monitor.types import BurnEvent, BurnStats, RawLog, TxDetails


class LogSource(Protocol):
    """Remote provider with range-bounded event queries."""

    async def current_head(self) -> int: ...

    async def get_logs(
        self,
        contract_address: str,
        event_name: str,
        match_args: dict[str, Any],
        from_block: int,
        to_block: int,
    ) -> list[RawLog]: ...

    async def get_transaction(self, tx_hash: str) -> dict[str, Any]: ...

    async def get_transaction_receipt(self, tx_hash: str) -> dict[str, Any]: ...

    async def get_block(self, block_number: int) -> dict[str, Any]: ...


class CheckpointStore(Protocol):
    """Durable checkpoint plus the set of recorded burns."""

    async def has_record(self, tx_hash: str) -> bool: ...

    async def insert_record(self, event: BurnEvent) -> bool:
        """Insert a burn; False if its hash was already recorded."""
        ...

    async def get_checkpoint(self) -> int | None: ...

    async def set_checkpoint(self, block_number: int) -> None: ...

    async def aggregate_stats(self) -> BurnStats: ...


class Notifier(Protocol):
    """Formats and delivers a burn alert; False on any failure."""

    async def notify(self, event: BurnEvent) -> bool: ...


# enrich(tx_hash, block_number) -> TxDetails
Enricher = Callable[[str, int], Awaitable[TxDetails]]
