"""
Burn alert notifier.

Builds the channel alert for a burn from current statistics and
delivers it.
"""

from loguru import logger

from app.config.settings import Settings
from app.services.burn_monitor.protocols import CheckpointStore
from app.services.burn_monitor.types import BurnEvent
from app.services.notification.core import TelegramNotificationSink
from app.services.notification.formatters import format_burn_alert


class BurnAlertNotifier:
    """Notifier used by the live scanner."""

    def __init__(
        self,
        store: CheckpointStore,
        sink: TelegramNotificationSink,
        settings: Settings,
    ) -> None:
        self.store = store
        self.sink = sink
        self.settings = settings

    async def notify(self, event: BurnEvent) -> bool:
        """
        Alert the channel about a burn.

        Args:
            event: Burn to announce

        Returns:
            True if delivered, False on any failure
        """
        try:
            stats = await self.store.aggregate_stats()
            message = format_burn_alert(event, stats, self.settings)
            return await self.sink.deliver(
                self.settings.telegram_channel_id, message
            )
        except Exception:
            logger.exception(f"[Telegram] Failed to send alert for {event.tx_hash}")
            return False
