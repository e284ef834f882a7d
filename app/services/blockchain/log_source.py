"""
Web3 log source.

Range-bounded event queries and detail lookups over web3.py HTTP
providers, executed off the event loop.
"""

from typing import Any

from loguru import logger
from web3 import Web3

from app.config.constants import BLOCKCHAIN_RPC_TIMEOUT
from app.config.settings import Settings
from app.services.burn_monitor.types import RawLog

from .async_executor import AsyncBlockchainExecutor
from .constants import ERC20_ABI


def normalize_event_log(event: Any) -> RawLog:
    """
    Convert a decoded web3 event into a plain dict.

    Args:
        event: web3 EventData (AttributeDict)

    Returns:
        Dict with 0x-prefixed transactionHash, int blockNumber/logIndex
        and plain args
    """
    tx_hash = event.get("transactionHash")
    block_number = event.get("blockNumber")
    log_index = event.get("logIndex")
    return {
        "transactionHash": Web3.to_hex(tx_hash) if tx_hash is not None else None,
        "blockNumber": int(block_number) if block_number is not None else None,
        "logIndex": int(log_index) if log_index is not None else None,
        "args": dict(event.get("args") or {}),
    }


class Web3LogSource:
    """
    Log source backed by web3.py.

    Every call goes through AsyncBlockchainExecutor so blocking HTTP
    requests never stall the event loop.
    """

    def __init__(self, executor: AsyncBlockchainExecutor) -> None:
        self.executor = executor

    @classmethod
    def from_settings(cls, settings: Settings) -> "Web3LogSource":
        """Build providers from RPC_URL and optional RPC_BACKUP_URL."""
        request_kwargs = {"timeout": BLOCKCHAIN_RPC_TIMEOUT}
        providers = {
            "primary": Web3(
                Web3.HTTPProvider(settings.rpc_url, request_kwargs=request_kwargs)
            ),
        }
        if settings.rpc_backup_url:
            providers["backup"] = Web3(
                Web3.HTTPProvider(
                    settings.rpc_backup_url, request_kwargs=request_kwargs
                )
            )
        logger.info(
            f"[Ethereum] Log source initialized with {len(providers)} provider(s)"
        )
        return cls(AsyncBlockchainExecutor(providers))

    async def current_head(self) -> int:
        """Get the latest block number."""
        return int(await self.executor.run_with_failover(
            lambda w3: w3.eth.block_number
        ))

    async def get_logs(
        self,
        contract_address: str,
        event_name: str,
        match_args: dict[str, Any],
        from_block: int,
        to_block: int,
    ) -> list[RawLog]:
        """
        Query decoded event logs for an inclusive block range.

        Args:
            contract_address: Emitting contract
            event_name: ABI event name (e.g. Transfer)
            match_args: Indexed argument filters, e.g. {"to": address}
            from_block: First block (inclusive)
            to_block: Last block (inclusive)

        Returns:
            Normalized logs in provider order
        """
        filters = {
            key: Web3.to_checksum_address(value) if isinstance(value, str) else value
            for key, value in match_args.items()
        }

        def _get_logs(w3: Web3) -> list[Any]:
            contract = w3.eth.contract(
                address=Web3.to_checksum_address(contract_address),
                abi=ERC20_ABI,
            )
            event = getattr(contract.events, event_name)()
            return list(event.get_logs(
                from_block=from_block,
                to_block=to_block,
                argument_filters=filters,
            ))

        events = await self.executor.run_with_failover(_get_logs)
        return [normalize_event_log(event) for event in events]

    async def get_transaction(self, tx_hash: str) -> dict[str, Any]:
        """Get transaction by hash."""
        return dict(await self.executor.run_with_failover(
            lambda w3: w3.eth.get_transaction(tx_hash)
        ))

    async def get_transaction_receipt(self, tx_hash: str) -> dict[str, Any]:
        """Get transaction receipt by hash."""
        return dict(await self.executor.run_with_failover(
            lambda w3: w3.eth.get_transaction_receipt(tx_hash)
        ))

    async def get_block(self, block_number: int) -> dict[str, Any]:
        """Get block header by number."""
        return dict(await self.executor.run_with_failover(
            lambda w3: w3.eth.get_block(block_number)
        ))

    async def close(self) -> None:
        """Release the executor threads."""
        self.executor.cleanup()
