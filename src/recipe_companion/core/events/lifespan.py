"""Application lifespan event handlers.

This module defines the lifespan context manager that handles:
- Application startup: logging, database pool, Redis, catalog client, services
- Application shutdown: the same, in reverse
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from recipe_companion.cache.last_search import LastSearchCache
from recipe_companion.cache.redis import (
    close_redis_pool,
    get_cache_client,
    init_redis_pool,
)
from recipe_companion.clients.spoonacular import CatalogClient
from recipe_companion.core.config import Settings, get_settings
from recipe_companion.database.connection import (
    close_database_pool,
    init_database_pool,
)
from recipe_companion.database.stores import (
    FamilyRecipeStore,
    FavoritesStore,
    LikeStore,
    PrivateRecipeStore,
    WatchHistoryStore,
)
from recipe_companion.observability.logging import get_logger, setup_logging
from recipe_companion.services.aggregator import RecipeAggregator
from recipe_companion.services.likes import LikeEngine


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI
    from redis.asyncio import Redis

logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup.

    Args:
        app: The FastAPI application instance.
        settings: Application settings.
    """
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )

    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    # Database is critical - every user-scoped operation needs it
    try:
        await init_database_pool()
    except Exception:
        logger.exception("Failed to initialize database pool")
        raise

    cache_client = await _init_cache(settings)

    catalog_client = CatalogClient(
        settings=settings.catalog,
        api_key=settings.SPOONACULAR_API_KEY,
    )
    await catalog_client.initialize()
    if not settings.SPOONACULAR_API_KEY:
        logger.warning("SPOONACULAR_API_KEY not set - catalog calls will fail")

    _init_services(app, settings, catalog_client, cache_client)

    logger.info("Application startup complete")


async def _init_cache(settings: Settings) -> Redis[Any] | None:
    """Initialize Redis and return its client, or None to run without it."""
    if not settings.last_search.enabled:
        logger.info("Last search cache disabled - skipping Redis")
        return None

    try:
        await init_redis_pool()
        return get_cache_client()
    except Exception:
        logger.exception("Failed to initialize Redis - continuing without cache")
        return None


def _init_services(
    app: FastAPI,
    settings: Settings,
    catalog_client: CatalogClient,
    cache_client: Redis[Any] | None,
) -> None:
    """Build stores and services and publish them on ``app.state``."""
    like_engine = LikeEngine(store=LikeStore(), catalog=catalog_client)

    app.state.catalog_client = catalog_client
    app.state.like_engine = like_engine
    app.state.aggregator = RecipeAggregator(catalog=catalog_client, likes=like_engine)
    app.state.favorites_store = FavoritesStore()
    app.state.watch_history_store = WatchHistoryStore()
    app.state.private_recipe_store = PrivateRecipeStore()
    app.state.family_recipe_store = FamilyRecipeStore(
        min_display_count=settings.family_recipes.min_display_count,
    )
    app.state.last_search_cache = LastSearchCache(
        cache_client,
        ttl=settings.last_search.ttl,
        prefix=settings.last_search.key_prefix,
        enabled=settings.last_search.enabled,
    )


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services.

    Args:
        app: The FastAPI application instance.
    """
    logger.info("Shutting down application")

    catalog_client: CatalogClient | None = getattr(app.state, "catalog_client", None)
    if catalog_client is not None:
        await catalog_client.shutdown()

    await close_redis_pool()
    await close_database_pool()

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings = get_settings()
    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)
