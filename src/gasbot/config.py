"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AliasChoices, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gasbot.exceptions import ConfigurationError


class TelegramSettings(BaseSettings):
    """Telegram Bot API connection and destination chat.

    The legacy BOT_TOKEN / CHAT_ID variable names are still accepted.
    """

    model_config = SettingsConfigDict(
        env_prefix="TELEGRAM_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    bot_token: SecretStr = Field(
        validation_alias=AliasChoices("TELEGRAM_BOT_TOKEN", "BOT_TOKEN"),
    )
    chat_id: str = Field(
        validation_alias=AliasChoices("TELEGRAM_CHAT_ID", "CHAT_ID"),
    )
    api_url: str = "https://api.telegram.org"
    poll_timeout: int = Field(default=30, ge=0)  # long-poll seconds for getUpdates
    request_timeout: float = Field(default=10.0, gt=0)


class RpcSettings(BaseSettings):
    """JSON-RPC endpoints used for gas price readings."""

    model_config = SettingsConfigDict(
        env_prefix="RPC_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    primary_url: str = Field(
        validation_alias=AliasChoices("RPC_PRIMARY_URL", "ALCHEMY_RPC"),
    )
    arbitrum_url: str = "https://arb1.arbitrum.io/rpc"
    optimism_url: str = "https://mainnet.optimism.io"
    timeout: float = Field(default=10.0, gt=0)


class TrackerSettings(BaseSettings):
    """Sampling cadence, retention and history file location."""

    model_config = SettingsConfigDict(env_prefix="TRACKER_", extra="ignore")

    history_path: str = "gas-history.json"
    retention_days: int = Field(default=7, ge=1)
    daily_window_hours: int = Field(default=24, ge=1)
    poll_interval_seconds: float = Field(default=20 * 60, gt=0)
    summary_interval_seconds: float = Field(default=24 * 60 * 60, gt=0)
    run_timeout_seconds: float = Field(default=60.0, gt=0)


class PricingSettings(BaseSettings):
    """Fiat rate lookup for USD cost estimates."""

    model_config = SettingsConfigDict(env_prefix="PRICING_", extra="ignore")

    coingecko_url: str = "https://api.coingecko.com/api/v3"
    asset_id: str = "ethereum"
    transfer_gas_units: int = 21000  # plain ETH transfer
    cache_ttl_seconds: int = Field(default=60, ge=0)
    timeout: float = Field(default=10.0, gt=0)


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    display_timezone: str = "UTC"
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    rpc: RpcSettings = Field(default_factory=RpcSettings)
    tracker: TrackerSettings = Field(default_factory=TrackerSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)

    @field_validator("display_timezone")
    @classmethod
    def check_display_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {value}") from e
        return value


def load_settings() -> AppSettings:
    """Load settings once at startup.

    Raises:
        ConfigurationError: If a required value (bot token, chat id,
            primary RPC URL) is missing or any value fails validation.
    """
    try:
        return AppSettings()
    except ValidationError as e:
        missing = [
            ".".join(str(part) for part in err["loc"]) or err["type"]
            for err in e.errors()
        ]
        raise ConfigurationError(f"Invalid configuration: {', '.join(missing)}") from e
