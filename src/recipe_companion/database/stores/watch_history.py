"""Watch history store.

A view is recorded with upsert-on-view semantics: the composite primary
key (user_id, recipe_id) guarantees one row per pair and a repeat view
only moves its timestamp forward.
"""

from __future__ import annotations

from datetime import UTC, datetime

from recipe_companion.database.stores.base import (
    BaseStore,
    UserId,
    affected_rows,
    require_user,
)
from recipe_companion.observability.logging import get_logger


logger = get_logger(__name__)

DEFAULT_RECENT_LIMIT = 3

_UPSERT_VIEW = """
    INSERT INTO watched_recipes (user_id, recipe_id, watched_at)
    VALUES ($1, $2, $3)
    ON CONFLICT (user_id, recipe_id)
    DO UPDATE SET watched_at = EXCLUDED.watched_at
"""

_SELECT_WATCHED = """
    SELECT recipe_id
    FROM watched_recipes
    WHERE user_id = $1
    ORDER BY watched_at DESC, recipe_id DESC
"""


class WatchHistoryStore(BaseStore):
    """Per-user history of viewed catalog recipes, most recent first.

    Every operation requires an identity: "no history" (empty list) and
    "no identity" (UnauthorizedError) are different answers.
    """

    async def record_view(
        self,
        user_id: UserId | None,
        recipe_id: int,
        viewed_at: datetime | None = None,
    ) -> datetime:
        """Insert or refresh the view record for the pair.

        Args:
            user_id: Viewing user.
            recipe_id: Catalog recipe id.
            viewed_at: Time of the view; defaults to now (UTC).

        Returns:
            The timestamp stored for the pair.
        """
        user_id = require_user(user_id, "record_view")
        viewed_at = viewed_at or datetime.now(UTC)

        with self.storage_errors("record_view", user_id=user_id, recipe_id=recipe_id):
            async with self.pool.acquire() as conn:
                await conn.execute(_UPSERT_VIEW, user_id, recipe_id, viewed_at)

        logger.debug("Recipe view recorded", user_id=user_id, recipe_id=recipe_id)
        return viewed_at

    async def list_all(self, user_id: UserId | None) -> list[int]:
        """All watched recipe ids, most recently viewed first."""
        user_id = require_user(user_id, "list_watched")

        with self.storage_errors("list_watched", user_id=user_id):
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(_SELECT_WATCHED, user_id)
        return [row["recipe_id"] for row in rows]

    async def list_recent(
        self,
        user_id: UserId | None,
        limit: int = DEFAULT_RECENT_LIMIT,
    ) -> list[int]:
        """The ``limit`` most recently watched recipe ids."""
        user_id = require_user(user_id, "list_recent_watched")

        with self.storage_errors("list_recent_watched", user_id=user_id, limit=limit):
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(f"{_SELECT_WATCHED} LIMIT $2", user_id, limit)
        return [row["recipe_id"] for row in rows]

    async def clear_all(self, user_id: UserId | None) -> int:
        """Delete the whole history; returns the number of rows removed."""
        user_id = require_user(user_id, "clear_watched")

        with self.storage_errors("clear_watched", user_id=user_id):
            async with self.pool.acquire() as conn:
                status = await conn.execute(
                    "DELETE FROM watched_recipes WHERE user_id = $1",
                    user_id,
                )

        removed = affected_rows(status)
        logger.info("Watch history cleared", user_id=user_id, removed=removed)
        return removed
