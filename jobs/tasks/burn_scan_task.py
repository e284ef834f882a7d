"""
Burn scan background task.

Runs the checkpointed scanner immediately at startup and then every
poll interval until stopped. Cycles never overlap: ticks missed while a
cycle was running collapse into a single catch-up cycle.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from app.utils.exceptions import is_transient


class BurnScanLoop:
    """
    Long-lived poll loop around ``scanner.scan_once()``.

    Errors from a cycle are logged and the loop waits for the next tick.
    ``stop()`` wakes the loop and waits for the in-flight cycle to finish.
    """

    def __init__(
        self,
        scanner: Any,
        interval: float,
        stop_event: asyncio.Event | None = None,
        on_error: Callable[[str], Awaitable[Any]] | None = None,
    ) -> None:
        """
        Initialize loop.

        Args:
            scanner: Object with an async ``scan_once()``
            interval: Seconds between cycle starts
            stop_event: Shared cancellation event (the scanner may poll it)
            on_error: Called with a description of non-transient cycle errors
        """
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.scanner = scanner
        self.interval = interval
        self.stop_event = stop_event or asyncio.Event()
        self.on_error = on_error
        self.cycles = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Start the loop as a background task."""
        if self.running:
            logger.warning("[Scanner] Scan loop already running")
            return self._task
        self.stop_event.clear()
        self._task = asyncio.create_task(self.run(), name="burn-scan-loop")
        logger.info(f"[Scanner] Starting polling every {self.interval} seconds")
        return self._task

    async def run(self) -> None:
        """Run cycles until the stop event is set."""
        loop = asyncio.get_running_loop()
        next_run = loop.time()

        while not self.stop_event.is_set():
            await self._run_cycle()

            next_run += self.interval
            now = loop.time()
            if now >= next_run:
                missed = int((now - next_run) // self.interval)
                if missed:
                    logger.debug(f"[Scanner] Coalesced {missed} missed tick(s)")
                next_run = now

            try:
                await asyncio.wait_for(
                    self.stop_event.wait(), timeout=max(0.0, next_run - now)
                )
            except TimeoutError:
                pass

        logger.info("[Scanner] Scan loop stopped")

    async def _run_cycle(self) -> None:
        self.cycles += 1
        try:
            await self.scanner.scan_once()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if is_transient(e):
                logger.warning(f"[Scanner] Cycle failed, retrying next interval: {e}")
            else:
                logger.exception(f"[Scanner] Error processing burns: {e}")
                await self._report_error(e)

    async def _report_error(self, error: Exception) -> None:
        if self.on_error is None:
            return
        try:
            await self.on_error(f"{error.__class__.__name__}: {error}")
        except Exception as e:
            logger.error(f"[Scanner] Failed to report error: {e}")

    async def stop(self) -> None:
        """Request stop and wait for the current cycle to finish."""
        self.stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None
