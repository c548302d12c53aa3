"""Like relation store.

Presence of a (user, recipe) row means "liked". Writes are expressed as
single statements so each call converges on its target state without a
separate read:

- ``set_liked(True)`` is an insert that tolerates an existing row.
- ``set_liked(False)`` is a delete that tolerates a missing row.
- ``toggle`` deletes the row if present and otherwise inserts it, in one
  data-modifying CTE.
"""

from __future__ import annotations

from recipe_companion.database.stores.base import BaseStore, UserId


_TOGGLE = """
    WITH removed AS (
        DELETE FROM recipe_likes
        WHERE user_id = $1 AND recipe_id = $2
        RETURNING 1
    )
    INSERT INTO recipe_likes (user_id, recipe_id)
    SELECT $1, $2
    WHERE NOT EXISTS (SELECT 1 FROM removed)
    ON CONFLICT (user_id, recipe_id) DO NOTHING
    RETURNING 1
"""


class LikeStore(BaseStore):
    """Raw access to the ``recipe_likes`` relation."""

    async def set_liked(self, user_id: UserId, recipe_id: int, liked: bool) -> bool:
        """Force the stored state; repeated calls with the same value are no-ops."""
        with self.storage_errors(
            "set_like", user_id=user_id, recipe_id=recipe_id, liked=liked
        ):
            async with self.pool.acquire() as conn:
                if liked:
                    await conn.execute(
                        "INSERT INTO recipe_likes (user_id, recipe_id) "
                        "VALUES ($1, $2) ON CONFLICT (user_id, recipe_id) DO NOTHING",
                        user_id,
                        recipe_id,
                    )
                else:
                    await conn.execute(
                        "DELETE FROM recipe_likes "
                        "WHERE user_id = $1 AND recipe_id = $2",
                        user_id,
                        recipe_id,
                    )
        return liked

    async def toggle(self, user_id: UserId, recipe_id: int) -> bool:
        """Flip the stored state; returns the state after the flip."""
        with self.storage_errors("toggle_like", user_id=user_id, recipe_id=recipe_id):
            async with self.pool.acquire() as conn:
                inserted = await conn.fetchval(_TOGGLE, user_id, recipe_id)
        return inserted is not None

    async def exists(self, user_id: UserId, recipe_id: int) -> bool:
        """Whether the user currently likes the recipe."""
        with self.storage_errors("check_like", user_id=user_id, recipe_id=recipe_id):
            async with self.pool.acquire() as conn:
                found = await conn.fetchval(
                    "SELECT EXISTS ("
                    "SELECT 1 FROM recipe_likes WHERE user_id = $1 AND recipe_id = $2"
                    ")",
                    user_id,
                    recipe_id,
                )
        return bool(found)

    async def count(self, recipe_id: int) -> int:
        """Number of local likes for a recipe."""
        with self.storage_errors("count_likes", recipe_id=recipe_id):
            async with self.pool.acquire() as conn:
                total = await conn.fetchval(
                    "SELECT COUNT(*) FROM recipe_likes WHERE recipe_id = $1",
                    recipe_id,
                )
        return int(total or 0)
