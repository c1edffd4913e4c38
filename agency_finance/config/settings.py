"""
Configuration management for the finance engine.
"""

from decimal import Decimal
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from agency_finance.calculators.currency import (
    BASE_CURRENCY,
    DEFAULT_RATES,
    FALLBACK_EXCHANGE_RATE,
    CurrencyNormalizer,
    StaticRateProvider,
)


class FinanceEngineConfig(BaseSettings):
    """Configuration settings for the finance engine."""

    # Currency Configuration
    base_currency: str = Field(default=BASE_CURRENCY, alias="BASE_CURRENCY")
    currency_rates: Dict[str, Decimal] = Field(
        default_factory=lambda: dict(DEFAULT_RATES), alias="CURRENCY_RATES"
    )
    fallback_exchange_rate: Decimal = Field(
        default=FALLBACK_EXCHANGE_RATE, alias="FALLBACK_EXCHANGE_RATE", gt=0
    )

    # Trend Configuration
    trend_months: int = Field(default=6, alias="TREND_MONTHS", ge=1)
    trend_max_workers: int = Field(default=1, alias="TREND_MAX_WORKERS", ge=1)

    # Data Source
    snapshot_file: Optional[str] = Field(default=None, alias="SNAPSHOT_FILE")

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        populate_by_name=True,
    )

    @field_validator("base_currency")
    @classmethod
    def validate_base_currency(cls, v):
        """Ensure the base currency is a 3-letter code."""
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError(f"Invalid currency code: {v}")
        return v

    @field_validator("currency_rates")
    @classmethod
    def validate_currency_rates(cls, v):
        """Ensure every rate is positive and codes are upper case."""
        rates = {}
        for code, rate in v.items():
            if rate <= 0:
                raise ValueError(f"Rate for {code} must be positive")
            rates[code.strip().upper()] = rate
        return rates

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    def build_normalizer(self) -> CurrencyNormalizer:
        """Currency normalizer using the configured table and fallback rate."""
        provider = StaticRateProvider(self.currency_rates, self.base_currency)
        return CurrencyNormalizer(provider, self.fallback_exchange_rate)


def load_config(env_file: Optional[str] = None) -> FinanceEngineConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return FinanceEngineConfig()


# Global configuration instance
_config: Optional[FinanceEngineConfig] = None


def get_config() -> FinanceEngineConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> FinanceEngineConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
