"""Background tasks."""

from jobs.tasks.burn_scan_task import BurnScanLoop

__all__ = ["BurnScanLoop"]
