"""
Bot Initialization - Shutdown Module.

Module: shutdown.py
Handles graceful shutdown of the bot.
Stops the scan loop and closes the log source and database connections.
"""

from loguru import logger

from app.services.blockchain.log_source import Web3LogSource
from app.services.burn_store import BurnStore
from jobs.tasks.burn_scan_task import BurnScanLoop


async def shutdown_handler(
    scan_loop: BurnScanLoop | None,
    log_source: Web3LogSource | None,
    store: BurnStore | None,
) -> None:
    """Handle graceful shutdown."""
    logger.info("[Bot] Graceful shutdown initiated...")

    if scan_loop is not None:
        try:
            await scan_loop.stop()
        except Exception as e:
            logger.warning(f"[Bot] Error stopping scan loop: {e}")

    if log_source is not None:
        try:
            await log_source.close()
        except Exception as e:
            logger.warning(f"[Bot] Error closing log source: {e}")

    if store is not None:
        try:
            await store.close()
        except Exception as e:
            logger.warning(f"[Database] Error closing database: {e}")

    logger.info("[Bot] Graceful shutdown complete")
