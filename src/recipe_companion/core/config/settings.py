"""Application configuration using Pydantic Settings with YAML support.

This module provides centralized configuration management with:
- YAML-based configuration files organized by domain
- Environment-specific overrides (local, test, development, production)
- Environment variable loading for secrets
- Caching for performance
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, BeforeValidator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


def parse_list(v: str | list[str]) -> list[str]:
    """Parse comma-separated string or list into list of strings."""
    if isinstance(v, str):
        return [x.strip() for x in v.split(",") if x.strip()]
    return v


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Recipe Companion Service"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1"
    cors_origins: Annotated[list[str], BeforeValidator(parse_list)] = []


class AuthSettings(BaseModel):
    """Identity propagation settings.

    Authentication itself happens upstream (gateway/session layer); this
    service only reads the already-resolved user identifier from a header.
    """

    user_id_header: str = "X-User-ID"


class DatabaseSettings(BaseModel):
    """PostgreSQL database configuration settings."""

    host: str = "localhost"
    port: int = 5432
    name: str = "recipes_db"
    db_schema: str = "public"
    user: str | None = None
    min_pool_size: int = 2
    max_pool_size: int = 10
    command_timeout: float = 30.0  # seconds
    ssl: bool = False


class RedisSettings(BaseModel):
    """Redis configuration settings."""

    host: str = "localhost"
    port: int = 6379
    user: str | None = None  # Redis ACL username (Redis 6.0+)
    cache_db: int = 0


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class CatalogSettings(BaseModel):
    """External recipe catalog (Spoonacular) settings."""

    base_url: str = "https://api.spoonacular.com/recipes"
    timeout: float = 10.0
    random_count: int = 3
    default_search_limit: int = 5


class WatchHistorySettings(BaseModel):
    """Watch history settings."""

    recent_limit: int = 3


class FamilyRecipesSettings(BaseModel):
    """Family recipe display rules."""

    min_display_count: int = 3


class LastSearchSettings(BaseModel):
    """Per-session last-search cache settings."""

    enabled: bool = True
    ttl: int = 1800  # seconds
    key_prefix: str = "last_search"


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Configuration is loaded from multiple sources with the following priority
    (highest to lowest):
    1. Environment variables
    2. .env file (secrets only)
    3. Environment-specific YAML files (config/environments/{APP_ENV}/)
    4. Base YAML files (config/base/)
    5. Default values in code

    Environment variables can override any setting using the nested delimiter '__'.
    For example: DATABASE__HOST=prod-db overrides database.host.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    auth: AuthSettings = AuthSettings()
    database: DatabaseSettings = DatabaseSettings()
    redis: RedisSettings = RedisSettings()
    logging: LoggingSettings = LoggingSettings()
    catalog: CatalogSettings = CatalogSettings()
    watch_history: WatchHistorySettings = WatchHistorySettings()
    family_recipes: FamilyRecipesSettings = FamilyRecipesSettings()
    last_search: LastSearchSettings = LastSearchSettings()

    # =========================================================================
    # Secrets (from .env only - never in YAML)
    # =========================================================================
    DATABASE_PASSWORD: str = ""
    REDIS_PASSWORD: str = ""
    SPOONACULAR_API_KEY: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings loading order (init > env > .env > YAML > secrets)."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def redis_cache_url(self) -> str:
        """Build Redis cache connection URL.

        URL format: redis://[user:password@]host:port/db
        """
        auth_part = ""
        if self.redis.user and self.REDIS_PASSWORD:
            auth_part = f"{self.redis.user}:{self.REDIS_PASSWORD}@"
        elif self.REDIS_PASSWORD:
            auth_part = f":{self.REDIS_PASSWORD}@"
        elif self.redis.user:
            auth_part = f"{self.redis.user}@"

        return (
            f"redis://{auth_part}{self.redis.host}:{self.redis.port}"
            f"/{self.redis.cache_db}"
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Using lru_cache ensures settings are only loaded once,
    improving performance and consistency.
    """
    return Settings()
