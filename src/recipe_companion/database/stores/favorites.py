"""Favorites store: the (user, recipe) favorite relation."""

from __future__ import annotations

import asyncpg

from recipe_companion.core.exceptions import ConflictError
from recipe_companion.database.stores.base import (
    BaseStore,
    UserId,
    affected_rows,
    require_user,
)
from recipe_companion.observability.logging import get_logger


logger = get_logger(__name__)


class FavoritesStore(BaseStore):
    """At most one row per (user, recipe); a duplicate add is a conflict."""

    async def add(self, user_id: UserId | None, recipe_id: int) -> None:
        """Mark a catalog recipe as a favorite.

        Raises:
            UnauthorizedError: If no identity is present.
            ConflictError: If the pair is already stored.
        """
        user_id = require_user(user_id, "add_favorite")

        with self.storage_errors("add_favorite", user_id=user_id, recipe_id=recipe_id):
            try:
                async with self.pool.acquire() as conn:
                    await conn.execute(
                        "INSERT INTO favorite_recipes (user_id, recipe_id) "
                        "VALUES ($1, $2)",
                        user_id,
                        recipe_id,
                    )
            except asyncpg.UniqueViolationError:
                raise ConflictError(
                    "Recipe is already in favorites",
                    context={"user_id": user_id, "recipe_id": recipe_id},
                ) from None

        logger.debug("Favorite added", user_id=user_id, recipe_id=recipe_id)

    async def remove(self, user_id: UserId | None, recipe_id: int) -> bool:
        """Remove a favorite; returns whether a row was actually removed."""
        user_id = require_user(user_id, "remove_favorite")

        with self.storage_errors(
            "remove_favorite", user_id=user_id, recipe_id=recipe_id
        ):
            async with self.pool.acquire() as conn:
                status = await conn.execute(
                    "DELETE FROM favorite_recipes "
                    "WHERE user_id = $1 AND recipe_id = $2",
                    user_id,
                    recipe_id,
                )
        return affected_rows(status) > 0

    async def list(self, user_id: UserId | None) -> list[int]:
        """Recipe ids favorited by the user, in no guaranteed order."""
        user_id = require_user(user_id, "list_favorites")

        with self.storage_errors("list_favorites", user_id=user_id):
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    "SELECT recipe_id FROM favorite_recipes WHERE user_id = $1",
                    user_id,
                )
        return [row["recipe_id"] for row in rows]
