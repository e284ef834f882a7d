"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

import re
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.config.constants import (
    ALCHEMY_MAINNET_URL,
    DEFAULT_AMOUNT_THRESHOLD,
    DEFAULT_BURN_ADDRESS,
    DEFAULT_FIREPIT_ADDRESS,
    DEFAULT_TOKEN_ADDRESS,
    FIREPIT_DEPLOYMENT_BLOCK,
    INITIAL_LOOKBACK_BLOCKS,
    MAX_BLOCKS_PER_QUERY,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telegram Bot
    telegram_bot_token: str
    telegram_channel_id: str
    send_startup_message: bool = True

    # Database
    database_url: str
    database_echo: bool = False

    # Blockchain RPC Providers
    rpc_url: str | None = None
    rpc_backup_url: str | None = None
    alchemy_api_key: str | None = None

    # Token and burn sinks
    token_address: str = DEFAULT_TOKEN_ADDRESS
    token_symbol: str = "UNI"
    token_decimals: int = Field(default=18, ge=0, le=36)
    firepit_address: str = DEFAULT_FIREPIT_ADDRESS
    burn_address: str = DEFAULT_BURN_ADDRESS

    # Alerts below this raw amount are recorded but not posted
    amount_threshold: int = Field(default=DEFAULT_AMOUNT_THRESHOLD, ge=0)

    # Live scanner
    poll_interval_seconds: int = Field(
        default=60, ge=1, description="Burn polling interval in seconds"
    )
    initial_lookback_blocks: int = Field(
        default=INITIAL_LOOKBACK_BLOCKS,
        ge=0,
        description="Blocks to look back on the very first run",
    )
    max_blocks_per_query: int = Field(
        default=MAX_BLOCKS_PER_QUERY,
        ge=0,
        description="Provider limit for to_block - from_block in eth_getLogs",
    )
    fetch_concurrency: int = Field(default=1, ge=1)
    enrich_concurrency: int = Field(default=4, ge=1)

    # Backfill
    backfill_deployment_block: int = Field(
        default=FIREPIT_DEPLOYMENT_BLOCK, ge=0
    )
    backfill_chunk_blocks: int = Field(
        default=10,
        ge=1,
        description="Blocks per getLogs request during backfill (free tier max 10)",
    )
    backfill_chunk_delay_ms: int = Field(default=100, ge=0)
    backfill_retry_delay_seconds: float = Field(default=2.0, ge=0)

    # Links
    site_url: str = "https://tokenjar.xyz"
    explorer_url: str = "https://etherscan.io"

    # Application
    environment: str = "production"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def set_rpc_defaults(self) -> "Settings":
        """Build the RPC URL from the Alchemy key if not provided."""
        if not self.rpc_url:
            if not self.alchemy_api_key:
                raise ValueError(
                    "RPC_URL or ALCHEMY_API_KEY is required. "
                    "Set one of them in your .env file."
                )
            self.rpc_url = ALCHEMY_MAINNET_URL.format(
                api_key=self.alchemy_api_key
            )
        return self

    @model_validator(mode="after")
    def validate_sinks(self) -> "Settings":
        """Burn sinks must be two distinct addresses."""
        if self.firepit_address == self.burn_address:
            raise ValueError(
                "FIREPIT_ADDRESS and BURN_ADDRESS must be different addresses"
            )
        return self

    @field_validator("telegram_bot_token")
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate Telegram bot token format."""
        pattern = r"^\d+:[A-Za-z0-9_-]{35}$"
        if not re.match(pattern, v):
            raise ValueError(
                "Invalid Telegram bot token format. "
                "Expected format: 123456789:ABCdefGHIjklMNOpqrsTUVwxyz"
            )
        return v

    @field_validator("telegram_channel_id")
    @classmethod
    def validate_channel_id(cls, v: str) -> str:
        """Channel must be @username or a numeric chat id."""
        v = v.strip()
        if not (v.startswith("@") or re.match(r"^-?\d+$", v)):
            raise ValueError(
                "TELEGRAM_CHANNEL_ID must be @channelname or a numeric chat id"
            )
        return v

    @field_validator("token_address", "firepit_address", "burn_address")
    @classmethod
    def validate_eth_address(cls, v: str) -> str:
        """Validate Ethereum address format."""
        if not v.startswith("0x") or len(v) != 42:
            raise ValueError(
                f"Invalid Ethereum address: {v}. "
                "Must start with 0x and be 42 characters long."
            )
        try:
            int(v[2:], 16)
        except ValueError as exc:
            raise ValueError(f"Invalid Ethereum address format: {v}") from exc
        return v.lower()

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL and force the asyncpg driver."""
        if not v.startswith(("postgresql://", "postgresql+asyncpg://")):
            raise ValueError(
                "DATABASE_URL must start with postgresql:// or postgresql+asyncpg://"
            )
        if v.startswith("postgresql://"):
            v = "postgresql+asyncpg://" + v[len("postgresql://"):]
        return v

    @field_validator("site_url", "explorer_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
