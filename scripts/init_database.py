#!/usr/bin/env python3
"""
Initialize database tables.

Development shortcut for `alembic upgrade head`: creates the burns and
bot_state tables straight from the model metadata.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger  # noqa: E402

from app.config.database import create_engine  # noqa: E402
from app.config.settings import get_settings  # noqa: E402
from app.models import Base  # noqa: E402
from bot.initialization.logging import setup_logging  # noqa: E402


async def init_database() -> None:
    """Create all tables that do not exist yet."""
    engine = create_engine(get_settings())
    tables = ", ".join(sorted(Base.metadata.tables))
    logger.info(f"[Database] Creating tables: {tables}")

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    finally:
        await engine.dispose()

    logger.success("[Database] Tables ready")


if __name__ == "__main__":
    setup_logging(log_file=None)
    asyncio.run(init_database())
