"""
Async executor for blockchain operations with failover support.

Provides async execution of synchronous Web3 operations with automatic
failover between RPC providers.
"""

import asyncio
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from loguru import logger
from web3 import Web3

from app.config.constants import (
    BLOCKCHAIN_EXECUTOR_TIMEOUT,
    BLOCKCHAIN_EXECUTOR_WORKERS,
)


class AsyncBlockchainExecutor:
    """
    Async executor for blockchain operations.

    Handles:
    - Thread pool execution of sync Web3 calls
    - Failover from the active provider to the next one
    - Timeout handling
    """

    def __init__(
        self,
        providers: dict[str, Web3],
        max_workers: int = BLOCKCHAIN_EXECUTOR_WORKERS,
        timeout: float = BLOCKCHAIN_EXECUTOR_TIMEOUT,
    ) -> None:
        """
        Initialize async executor.

        Args:
            providers: Web3 instances by name, primary first
            max_workers: Maximum thread pool workers
            timeout: Per-call timeout in seconds
        """
        if not providers:
            raise ValueError("At least one Web3 provider is required")
        self.providers = providers
        self.active_provider_name = next(iter(providers))
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="web3"
        )

    async def _run_on(self, name: str, sync_func: Callable[[Web3], Any]) -> Any:
        loop = asyncio.get_running_loop()
        w3 = self.providers[name]
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(self._executor, lambda: sync_func(w3)),
                timeout=self.timeout,
            )
        except TimeoutError:
            logger.error(f"Timeout in blockchain operation on provider '{name}'")
            raise TimeoutError(f"Blockchain operation timeout on {name}")

    async def run_with_failover(self, sync_func: Callable[[Web3], Any]) -> Any:
        """
        Run a synchronous Web3 function with failover logic.

        Args:
            sync_func: Synchronous function that takes Web3 instance as argument

        Returns:
            Result from the function

        Raises:
            Exception: The primary provider's error if every provider fails
        """
        current_name = self.active_provider_name
        try:
            return await self._run_on(current_name, sync_func)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            backup_name = next(
                (n for n in self.providers if n != current_name), None
            )
            if not backup_name:
                raise

            logger.warning(
                f"Provider '{current_name}' failed: {e}. "
                f"Switching to backup: {backup_name}"
            )
            try:
                result = await self._run_on(backup_name, sync_func)
            except Exception as e2:
                logger.error(f"Backup provider failed: {e2}")
                raise e from e2

            # If success, switch permanent
            self.active_provider_name = backup_name
            return result

    def cleanup(self) -> None:
        """Clean up thread pool executor."""
        self._executor.shutdown(wait=False, cancel_futures=True)
