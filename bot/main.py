"""
Bot main entry point.

Starts the burn monitor: verifies the database, the RPC provider and the
Telegram channel, starts the scan loop and polls for /stats and /test.

Delegates initialization to modular components in bot/initialization/.
"""

import asyncio
import sys
import warnings
from pathlib import Path


# Suppress eth_utils network warnings about invalid ChainId
# Must be set BEFORE importing any modules that use eth_utils
warnings.filterwarnings(
    "ignore",
    message=".*does not have a valid ChainId.*",
    category=UserWarning,
)

from aiogram import Bot, Dispatcher  # noqa: E402
from aiogram.client.default import DefaultBotProperties  # noqa: E402
from aiogram.enums import ParseMode  # noqa: E402
from aiogram.types import ErrorEvent  # noqa: E402
from loguru import logger  # noqa: E402
from pydantic import ValidationError  # noqa: E402


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config.database import create_engine, create_session_maker  # noqa: E402
from app.config.settings import Settings, get_settings  # noqa: E402
from app.services.blockchain.log_source import Web3LogSource  # noqa: E402
from app.services.burn_monitor.scanner import CheckpointedScanner  # noqa: E402
from app.services.burn_store import BurnStore  # noqa: E402
from app.services.notification import (  # noqa: E402
    BurnAlertNotifier,
    TelegramNotificationSink,
)
from app.services.notification.formatters import (  # noqa: E402
    format_error_message,
    format_startup_message,
)
from app.utils.exceptions import ConfigurationError  # noqa: E402
from bot.initialization.handlers import register_all_handlers  # noqa: E402
from bot.initialization.logging import setup_logging  # noqa: E402
from bot.initialization.shutdown import shutdown_handler  # noqa: E402
from jobs.tasks.burn_scan_task import BurnScanLoop  # noqa: E402


async def run(settings: Settings) -> None:  # noqa: C901
    """Initialize collaborators and run until polling stops."""
    store: BurnStore | None = None
    log_source: Web3LogSource | None = None
    scan_loop: BurnScanLoop | None = None
    bot: Bot | None = None

    try:
        # Database
        logger.info("[Bot] Initializing database...")
        engine = create_engine(settings)
        store = BurnStore(create_session_maker(engine), engine)
        try:
            await store.ping()
        except Exception as e:
            raise ConfigurationError(f"Database unreachable: {e}") from e

        # Ethereum provider
        logger.info("[Bot] Initializing Ethereum client...")
        log_source = Web3LogSource.from_settings(settings)
        try:
            head = await log_source.current_head()
        except Exception as e:
            raise ConfigurationError(f"RPC provider unreachable: {e}") from e
        logger.info(f"[Ethereum] Connected, current block: {head}")

        # Telegram
        logger.info("[Bot] Initializing Telegram bot...")
        bot = Bot(
            token=settings.telegram_bot_token,
            default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        )
        sink = TelegramNotificationSink(bot)
        if not await sink.test_connection(settings.telegram_channel_id):
            raise ConfigurationError(
                f"Cannot access Telegram channel {settings.telegram_channel_id}"
            )

        if settings.send_startup_message:
            await sink.deliver(
                settings.telegram_channel_id, format_startup_message(settings)
            )
            logger.info("[Bot] Startup message sent")

        # Scan loop
        stop_event = asyncio.Event()
        scanner = CheckpointedScanner(
            log_source=log_source,
            store=store,
            notifier=BurnAlertNotifier(store, sink, settings),
            settings=settings,
            should_stop=stop_event.is_set,
        )

        async def report_error(error: str) -> bool:
            return await sink.deliver(
                settings.telegram_channel_id, format_error_message(error)
            )

        scan_loop = BurnScanLoop(
            scanner,
            settings.poll_interval_seconds,
            stop_event=stop_event,
            on_error=report_error,
        )

        # Dispatcher, collaborators are injected into handlers by name
        dp = Dispatcher()
        dp["burn_store"] = store
        dp["settings"] = settings

        @dp.error()
        async def error_handler(event: ErrorEvent) -> bool:
            """Global error handler for unhandled exceptions."""
            logger.exception(
                f"[Bot] Unhandled error: "
                f"{event.exception.__class__.__name__}: {event.exception}"
            )
            return True

        register_all_handlers(dp)

        scan_loop.start()
        logger.success("[Bot] Bot is running! Press Ctrl+C to stop.")

        # start_polling stops on SIGINT/SIGTERM
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await shutdown_handler(scan_loop, log_source, store)
        if bot is not None:
            await bot.session.close()


def main() -> None:
    """Load settings and run the bot, exiting non-zero on startup failure."""
    setup_logging()
    logger.info("=== Burn Bot Starting ===")

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"[Bot] Invalid configuration:\n{e}")
        sys.exit(1)

    setup_logging(settings.log_level)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("[Bot] Bot stopped by user (KeyboardInterrupt)")
    except ConfigurationError as e:
        logger.error(f"[Bot] Startup failed: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"[Bot] Bot crashed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
