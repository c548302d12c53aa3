"""PostgreSQL connection pool for the per-user relation tables.

The pool is the only shared mutable resource in the process and the only
serialization point between concurrent requests. Startup verifies that
the relation tables from ``sql/create_tables.sql`` exist so a missing
migration shows up in the logs and on ``/ready`` instead of as 500s on
the first write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

import asyncpg

from recipe_companion.core.config import get_settings
from recipe_companion.observability.logging import get_logger


if TYPE_CHECKING:
    from asyncpg import Pool

    from recipe_companion.core.config.settings import DatabaseSettings

logger = get_logger(__name__)

RELATION_TABLES: Final[tuple[str, ...]] = (
    "favorite_recipes",
    "watched_recipes",
    "recipe_likes",
    "private_recipes",
    "family_recipes",
)

_pool: Pool | None = None


def pool_options(database: DatabaseSettings, password: str = "") -> dict[str, Any]:
    """Keyword arguments for ``asyncpg.create_pool``."""
    return {
        "host": database.host,
        "port": database.port,
        "database": database.name,
        "user": database.user,
        "password": password or None,
        "min_size": database.min_pool_size,
        "max_size": database.max_pool_size,
        "command_timeout": database.command_timeout,
        "ssl": True if database.ssl else None,
        "server_settings": {"search_path": database.db_schema},
    }


async def missing_tables(conn: asyncpg.Connection) -> list[str]:
    """Relation tables not visible on the connection's search path."""
    rows = await conn.fetch(
        "SELECT name FROM unnest($1::text[]) AS name WHERE to_regclass(name) IS NULL",
        list(RELATION_TABLES),
    )
    return [row["name"] for row in rows]


async def init_database_pool() -> None:
    """Create the pool and check connectivity and schema.

    Raises:
        asyncpg.PostgresError: If the database cannot be reached.
    """
    global _pool  # noqa: PLW0603

    settings = get_settings()
    database = settings.database

    logger.info(
        "Initializing database connection pool",
        host=database.host,
        port=database.port,
        database=database.name,
        schema=database.db_schema,
    )

    _pool = await asyncpg.create_pool(
        **pool_options(database, settings.DATABASE_PASSWORD)
    )

    try:
        assert _pool is not None
        async with _pool.acquire() as conn:
            missing = await missing_tables(conn)
    except asyncpg.PostgresError:
        logger.exception("Failed to connect to database")
        raise

    if missing:
        logger.warning(
            "Database is reachable but relation tables are missing",
            missing=missing,
        )
    else:
        logger.info("Database connection established successfully")


async def close_database_pool() -> None:
    """Close the pool if it was created."""
    global _pool  # noqa: PLW0603

    if _pool is None:
        return

    await _pool.close()
    _pool = None
    logger.info("Database connection pool closed")


def get_database_pool() -> Pool:
    """Get the database connection pool.

    Raises:
        RuntimeError: If pool is not initialized.
    """
    if _pool is None:
        msg = "Database pool not initialized. Call init_database_pool() first."
        raise RuntimeError(msg)
    return _pool


async def check_database_health() -> dict[str, str]:
    """Database status for the readiness probe.

    ``healthy`` only when the database answers and every relation table
    exists; ``schema_missing`` when it answers without them.
    """
    if _pool is None:
        return {"database": "not_initialized"}

    try:
        async with _pool.acquire() as conn:
            missing = await missing_tables(conn)
    except (asyncpg.PostgresError, OSError):
        return {"database": "unhealthy"}

    return {"database": "schema_missing" if missing else "healthy"}
