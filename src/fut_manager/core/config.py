"""
Configuration management for the FUT Manager API.

Uses Pydantic settings for type-safe configuration with environment variable support.
All settings can be overridden via environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables or a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
        populate_by_name=True,
    )

    # ==========================================================================
    # Application Metadata
    # ==========================================================================
    app_name: str = "FUT Manager API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", description="development, staging, production")

    # ==========================================================================
    # Database Configuration
    # ==========================================================================
    database_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "CONNECTIONSTRING"),
        description="PostgreSQL connection string for the document store",
    )
    database_min_pool_size: int = Field(default=2, ge=1, le=50)
    database_pool_size: int = Field(default=10, ge=1, le=50)

    @computed_field
    @property
    def db_url(self) -> str:
        """Get the effective database URL."""
        return self.database_url or ""

    # ==========================================================================
    # API Configuration
    # ==========================================================================
    api_host: str = "0.0.0.0"
    api_port: int = Field(default=8080, validation_alias=AliasChoices("PORT", "API_PORT"))
    api_prefix: str = "/api/v1"

    # ==========================================================================
    # CORS Configuration
    # ==========================================================================
    cors_allow_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins.",
    )
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "HEAD", "OPTIONS"]
    cors_allow_headers: list[str] = ["X-Requested-With", "Content-Type", "Authorization"]
    cors_allow_credentials: bool = False
    cors_expose_headers: list[str] = ["X-Process-Time", "X-Cache"]

    # ==========================================================================
    # Caching Configuration
    # ==========================================================================
    redis_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("REDIS_URL", "REDISTOGO_URL"),
        description="Redis connection URL (redis://:password@host:port/db)",
    )
    cache_prefix: str = "futmanager:"
    cache_default_ttl: int = Field(default=3600, description="Fallback TTL (seconds)")
    random_pool_ttl: int = Field(default=2700, description="TTL for random-draw player pools (seconds)")

    # ==========================================================================
    # Game Rules
    # ==========================================================================
    all_players_limit: int = Field(default=3000, description="Cap for unfiltered player queries")
    top_players_min_overall: int = 87
    top_players_max_overall: int = 99


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
