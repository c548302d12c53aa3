"""Redis client and connection pool management.

This module provides:
- Async Redis connection pool for the short-lived per-session cache
- Connection lifecycle management via lifespan events
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from recipe_companion.core.config import get_settings
from recipe_companion.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

# Global connection pool and client
_cache_pool: ConnectionPool[Any] | None = None
_cache_client: Redis[Any] | None = None


async def init_redis_pool() -> None:
    """Initialize the Redis cache connection pool.

    Should be called during application startup (lifespan).
    """
    global _cache_pool, _cache_client  # noqa: PLW0603

    settings = get_settings()

    logger.info(
        "Initializing Redis connection",
        host=settings.redis.host,
        port=settings.redis.port,
    )

    _cache_pool = ConnectionPool.from_url(
        settings.redis_cache_url,
        max_connections=20,
        decode_responses=True,
    )
    _cache_client = redis.Redis(connection_pool=_cache_pool)

    try:
        await _cache_client.ping()
        logger.info("Redis connection established successfully")
    except redis.ConnectionError:
        logger.exception("Failed to connect to Redis")
        await close_redis_pool()
        raise


async def close_redis_pool() -> None:
    """Close the Redis connection pool.

    Should be called during application shutdown (lifespan).
    """
    global _cache_pool, _cache_client  # noqa: PLW0603

    logger.info("Closing Redis connection")

    if _cache_client:
        await _cache_client.aclose()
        _cache_client = None

    if _cache_pool:
        await _cache_pool.disconnect()
        _cache_pool = None

    logger.info("Redis connection closed")


def get_cache_client() -> Redis[Any]:
    """Get the cache Redis client.

    Raises:
        RuntimeError: If Redis is not initialized.
    """
    if _cache_client is None:
        msg = "Redis cache client not initialized. Call init_redis_pool() first."
        raise RuntimeError(msg)
    return _cache_client


async def check_redis_health() -> dict[str, str]:
    """Check health of the Redis cache connection."""
    results: dict[str, str] = {}

    try:
        if _cache_client:
            await _cache_client.ping()
            results["redis_cache"] = "healthy"
        else:
            results["redis_cache"] = "not_initialized"
    except redis.ConnectionError:
        results["redis_cache"] = "unhealthy"

    return results
