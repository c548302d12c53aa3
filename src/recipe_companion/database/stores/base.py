"""Shared plumbing for the per-user stores.

Each store talks to PostgreSQL through the asyncpg pool with parameterized
statements only. Driver failures are re-raised as ``StorageError`` carrying
the operation name and the ids involved.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import asyncpg
import orjson
from pydantic import TypeAdapter

from recipe_companion.core.exceptions import StorageError, UnauthorizedError
from recipe_companion.database.connection import get_database_pool
from recipe_companion.observability.logging import get_logger
from recipe_companion.schemas.user_recipes import IngredientEntry


if TYPE_CHECKING:
    from asyncpg import Pool

logger = get_logger(__name__)

# Opaque user identifier handed over by the identity collaborator
UserId = int

_INGREDIENTS = TypeAdapter(list[IngredientEntry])

_DRIVER_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    asyncpg.exceptions.InternalClientError,
    OSError,
)


def require_user(user_id: UserId | None, operation: str) -> UserId:
    """Return the identity, or fail with ``UnauthorizedError`` when absent."""
    if user_id is None:
        raise UnauthorizedError(operation)
    return user_id


def affected_rows(status: str) -> int:
    """Row count from an asyncpg command status such as ``"DELETE 3"``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError):
        return 0


def encode_ingredients(ingredients: list[IngredientEntry] | None) -> str:
    """Serialize an ordered ingredient list for a JSON text column."""
    return orjson.dumps(
        [entry.model_dump(by_alias=False) for entry in ingredients or []]
    ).decode()


def decode_ingredients(raw: str | bytes | None) -> list[IngredientEntry]:
    """Parse a stored ingredient column.

    Raises:
        ValueError: If the column holds malformed JSON or an unexpected shape.
    """
    if not raw:
        return []
    return _INGREDIENTS.validate_python(orjson.loads(raw))


class BaseStore:
    """Pool access and error wrapping shared by all stores."""

    def __init__(self, pool: Pool | None = None) -> None:
        """Initialize store with optional connection pool.

        Args:
            pool: asyncpg connection pool. If None, uses global pool.
        """
        self._pool = pool

    @property
    def pool(self) -> Pool:
        """Get the database connection pool."""
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    @contextmanager
    def storage_errors(self, operation: str, **context: Any) -> Iterator[None]:
        """Translate driver failures raised inside the block into StorageError."""
        try:
            yield
        except _DRIVER_ERRORS as e:
            logger.error(
                "Storage operation failed",
                operation=operation,
                error=str(e),
                **context,
            )
            raise StorageError(
                f"Failed to {operation.replace('_', ' ')}",
                context={"operation": operation, **context},
            ) from e
