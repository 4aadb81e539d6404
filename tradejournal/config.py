"""Configuration management using pydantic settings."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: Path = Field(default=Path("tradejournal.db"))


class JournalConfig(BaseModel):
    """Journal defaults and report limits."""

    default_journal_type: Literal["crypto", "stock"] = Field(default="crypto")
    default_currency: str = Field(default="USD", min_length=3, max_length=3)

    # Calendar view reads at most this many daily summaries
    summary_limit: int = Field(
        default=90,
        ge=1,
        le=3660,
        description="Maximum number of daily summaries returned (newest first)",
    )

    top_symbols_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of symbols kept in the analytics top-symbols table",
    )

    @field_validator("default_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.upper()


class CurrencyConfig(BaseModel):
    """Exchange rate source configuration."""

    api_key: str = Field(default="")
    base_url: str = Field(default="https://api.freecurrencyapi.com/v1/latest")
    base_currency: str = Field(default="USD")
    quote_currencies: list[str] = Field(default_factory=lambda: ["IDR"])
    cache_ttl_seconds: int = Field(default=3600, ge=0)
    timeout_seconds: float = Field(default=10.0, gt=0)

    # Used whenever the rate source is unavailable (approximate, USD based)
    fallback_rates: dict[str, float] = Field(
        default_factory=lambda: {"USD": 1.0, "IDR": 15800.0}
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    json_format: bool = Field(default=True)


class Settings(BaseSettings):
    """Application settings."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    journal: JournalConfig = Field(default_factory=JournalConfig)
    currency: CurrencyConfig = Field(default_factory=CurrencyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "TRADEJOURNAL_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


def load_settings() -> Settings:
    """Load settings from environment variables."""
    return Settings()
