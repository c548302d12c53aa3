"""PostgreSQL database layer.

This module provides:
- Connection pool management
- Store classes for the per-user relations
- Health check utilities
"""

from recipe_companion.database.connection import (
    check_database_health,
    close_database_pool,
    get_database_pool,
    init_database_pool,
)


__all__ = [
    "check_database_health",
    "close_database_pool",
    "get_database_pool",
    "init_database_pool",
]
