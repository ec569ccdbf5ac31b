"""Configuration loading for the storefront.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Store configuration
    store_sqlite_path: str = Field(
        default="./data/storefront.db",
        description="SQLite database file path",
    )
    store_pool_size: int = Field(
        default=5,
        description="Number of pooled SQLite connections",
    )

    # Checkout configuration
    promo_code: str = Field(
        default="FREE",
        description="Promo code required to place an order (case-insensitive)",
    )

    # Catalog cache configuration
    top_selling_count: int = Field(
        default=6,
        description="Number of albums in the best-seller listing",
    )
    catalog_cache_ttl_seconds: float = Field(
        default=600.0,
        description="Validity window of the cached best-seller listing",
    )

    # Session
    default_username: str = Field(
        default="",
        description="User signed in when the CLI starts (empty for anonymous)",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("promo_code")
    @classmethod
    def validate_promo_code(cls, v: str) -> str:
        """Ensure a promo code is configured."""
        if not v.strip():
            raise ValueError("promo_code must be a non-empty string")
        return v.strip()

    @field_validator("top_selling_count", "store_pool_size")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Ensure counts are positive."""
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator("catalog_cache_ttl_seconds")
    @classmethod
    def validate_cache_ttl(cls, v: float) -> float:
        """Ensure the cache validity window is positive."""
        if v <= 0:
            raise ValueError("catalog_cache_ttl_seconds must be positive")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
