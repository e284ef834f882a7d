"""
Bot Initialization - Logging Module.

Module: logging.py
Configures loguru logger for the bot and the CLI scripts.
Sets up log rotation and retention policies.
"""

import sys

from loguru import logger


def setup_logging(level: str = "INFO", log_file: str | None = "logs/burn_bot.log") -> None:
    """
    Configure logger with file rotation.

    Args:
        level: Minimum level for both sinks
        log_file: Rotating file sink path, None to log to stderr only
    """
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            level=level,
            encoding="utf-8",
        )
