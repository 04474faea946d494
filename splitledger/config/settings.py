from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Ledger settings
    tolerance: Decimal = Field(default=Decimal("0.01"), alias="SPLITLEDGER_TOLERANCE")
    currency: str = Field(default="Rs", alias="SPLITLEDGER_CURRENCY")
    strict_splits: bool = Field(default=True, alias="SPLITLEDGER_STRICT_SPLITS")
    max_amount: Decimal = Field(default=Decimal("1000000"), alias="SPLITLEDGER_MAX_AMOUNT")

    # Telegram delivery (optional)
    telegram_bot_token: Optional[str] = Field(default=None, alias="TELEGRAM_BOT_TOKEN")

    # Application settings
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
settings = Settings()
