# src/storeprice/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and a .env file with validation.

Files that USE this module:
- storeprice.app (loads settings for logging and wiring)
- storeprice.adapters.providers.exchangerate_api (API URL and HTTP timeout)
- storeprice.application.rate_cache (freshness, staleness and retry windows)
- storeprice.application.shipping (domestic country, threshold, weight tiers)

Files that this module USES:
- storeprice.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from decimal import Decimal  # Exact threshold amounts
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from storeprice.shared.validators import (
    validate_country_code,  # Validate ISO 3166-1 alpha-2 format
    validate_url,  # Validate http(s) URL format
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Storefront ---
    domestic_country: str = Field(default="NL", alias="DOMESTIC_COUNTRY")

    # --- Exchange rates ---
    exchange_rates_url: str = Field(
        default="https://api.exchangerate-api.com/v4/latest/EUR", alias="EXCHANGE_RATES_URL"
    )
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    rates_cache_minutes: int = Field(default=60, alias="RATES_CACHE_MINUTES", ge=1, le=1440)
    rates_max_stale_hours: int = Field(default=24, alias="RATES_MAX_STALE_HOURS", ge=1, le=720)
    rates_retry_seconds: int = Field(default=60, alias="RATES_RETRY_SECONDS", ge=0, le=3600)

    # --- Shipping ---
    # Unset means shipping is always charged unless every item ships free
    free_shipping_threshold: Optional[Decimal] = Field(default=None, alias="FREE_SHIPPING_THRESHOLD", ge=0)
    use_weight_tiers: bool = Field(default=False, alias="USE_WEIGHT_TIERS")

    # --- Logging ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=False, alias="STOREPRICE_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @field_validator("domestic_country")
    @classmethod
    def validate_domestic_country(cls, v: str) -> str:
        """Validate and normalize the domestic country code."""
        if not validate_country_code(v):
            raise ValueError("DOMESTIC_COUNTRY must be an ISO 3166-1 alpha-2 code")
        return v.upper()

    @field_validator("exchange_rates_url")
    @classmethod
    def validate_rates_url(cls, v: str) -> str:
        """Validate exchange rates URL format."""
        if not validate_url(v):
            raise ValueError("Invalid EXCHANGE_RATES_URL")
        return v


# Global settings instance
settings = Settings()
