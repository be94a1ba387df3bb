"""
Configuration management for FIFA Tracker.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults for development. Locations of the ratings dataset
and live enrichment tuning can be overridden via environment variables
or a .env file.

Usage:
    from fifatracker.config import settings
    print(settings.ratings_dataset_locations)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file
    in the project root directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ==========================================================================
    # Ratings Dataset Configuration
    # ==========================================================================

    # Probed in order; the first location that responds wins
    ratings_dataset_locations: list[str] = Field(
        default=[
            "sofifa_my_players_app.json",
            "data/sofifa_my_players_app.json",
        ],
        description="Ordered candidate locations (file paths or http(s) URLs) of the ratings JSON",
    )
    ratings_http_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds when the dataset is fetched over HTTP",
    )

    # ==========================================================================
    # Live Enrichment (SoFIFA) Configuration
    # ==========================================================================

    sofifa_base_url: str = Field(
        default="https://sofifa.com",
        description="Base URL used to build player profile links",
    )
    live_data_enabled: bool = Field(
        default=True,
        description="Allow live SoFIFA lookups on top of the local dataset",
    )
    live_cache_ttl_seconds: int = Field(
        default=3600,
        description="How long a live profile result is reused before refetching",
    )
    live_rate_limit_per_minute: int = Field(
        default=10,
        description="Maximum live profile requests per minute",
    )

    # ==========================================================================
    # Scraping Configuration
    # ==========================================================================

    scrape_headless: bool = Field(
        default=True,
        description="Run browser in headless mode for scraping",
    )
    scrape_timeout: int = Field(
        default=30000,
        description="Default timeout for page loads in milliseconds",
    )
    scrape_max_retries: int = Field(
        default=3,
        description="Maximum retry attempts for failed page loads",
    )

    # ==========================================================================
    # Player Matching Configuration
    # ==========================================================================

    # See players/matcher.py for the term-wise matching rules
    player_fuzzy_threshold: float = Field(
        default=0.7,
        description="Minimum per-term similarity (exclusive) for a fuzzy name match",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("player_fuzzy_threshold")
    @classmethod
    def validate_fuzzy_threshold(cls, v: float) -> float:
        """Similarity scores live in [0, 1]."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("player_fuzzy_threshold must be between 0 and 1")
        return v

    @field_validator("sofifa_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once,
    which is important because loading from .env can be slow.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
