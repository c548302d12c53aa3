"""Redis caching layer.

This module provides:
- Redis connection management
- The per-session last-search cache
"""

from recipe_companion.cache.last_search import LastSearchCache
from recipe_companion.cache.redis import (
    check_redis_health,
    close_redis_pool,
    get_cache_client,
    init_redis_pool,
)


__all__ = [
    "LastSearchCache",
    "check_redis_health",
    "close_redis_pool",
    "get_cache_client",
    "init_redis_pool",
]
