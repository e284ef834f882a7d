"""
Notification service module.

Structure:
- core.py: Telegram channel delivery
- burn_alerts.py: Burn alert notifier used by the scanner
- formatters.py: HTML message formats
"""

from app.services.notification.burn_alerts import BurnAlertNotifier
from app.services.notification.core import TelegramNotificationSink

__all__ = [
    "BurnAlertNotifier",
    "TelegramNotificationSink",
]
