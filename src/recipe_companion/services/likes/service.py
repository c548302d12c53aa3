"""Like reconciliation engine.

Maintains the user-to-recipe like relation and blends it with the
catalog-reported popularity. Combined popularity is computed at read time
from current state; nothing is aggregated or memoized.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from recipe_companion.core.exceptions import AppError
from recipe_companion.database.stores.base import UserId, require_user
from recipe_companion.database.stores.likes import LikeStore
from recipe_companion.observability.logging import get_logger
from recipe_companion.schemas.likes import LikeSummary, LikeToggleResult


if TYPE_CHECKING:
    from recipe_companion.clients.spoonacular import CatalogClient

logger = get_logger(__name__)


class LikeEngine:
    """Like toggling, combined popularity and per-user like state."""

    def __init__(
        self,
        store: LikeStore | None = None,
        catalog: CatalogClient | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Like relation store. Defaults to one on the global pool.
            catalog: Catalog client used for the external popularity figure.
                Without one, the external part of the count is 0.
        """
        self._store = store or LikeStore()
        self._catalog = catalog

    async def toggle(
        self,
        user_id: UserId | None,
        recipe_id: int,
        desired: bool | None = None,
    ) -> LikeToggleResult:
        """Set or flip the caller's like on a recipe.

        With ``desired`` the call is idempotent: repeating it leaves exactly
        one (or zero) relation rows. Without it the stored state is flipped
        in a single statement.

        Raises:
            UnauthorizedError: If no identity is present.
            StorageError: If the write fails.
        """
        user_id = require_user(user_id, "toggle_like")

        if desired is None:
            liked = await self._store.toggle(user_id, recipe_id)
        else:
            liked = await self._store.set_liked(user_id, recipe_id, desired)

        logger.info(
            "Recipe like updated",
            user_id=user_id,
            recipe_id=recipe_id,
            liked=liked,
        )
        return LikeToggleResult(liked=liked)

    async def count_combined(
        self,
        recipe_id: int,
        catalog_popularity: int | None = None,
    ) -> int:
        """Catalog popularity plus the number of local likes.

        Args:
            recipe_id: Catalog recipe id.
            catalog_popularity: Already-known catalog figure. When omitted it
                is fetched; a failed fetch counts as 0.

        Raises:
            StorageError: If the local count cannot be read.
        """
        if catalog_popularity is None:
            catalog_popularity = await self._catalog_popularity(recipe_id)

        local_likes = await self._store.count(recipe_id)
        return catalog_popularity + local_likes

    async def has_liked(self, user_id: UserId | None, recipe_id: int) -> bool:
        """Whether the caller likes the recipe.

        Advisory display state: no identity, or any failure, yields False.
        """
        if user_id is None:
            return False

        try:
            return await self._store.exists(user_id, recipe_id)
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Like state lookup failed; reporting not liked",
                user_id=user_id,
                recipe_id=recipe_id,
                error=str(e),
            )
            return False

    async def summary(
        self,
        recipe_id: int,
        user_id: UserId | None = None,
    ) -> LikeSummary:
        """Combined popularity and the caller's like state."""
        total_likes, user_has_liked = await asyncio.gather(
            self.count_combined(recipe_id),
            self.has_liked(user_id, recipe_id),
        )
        return LikeSummary(total_likes=total_likes, user_has_liked=user_has_liked)

    async def _catalog_popularity(self, recipe_id: int) -> int:
        if self._catalog is None:
            return 0

        try:
            return await self._catalog.popularity(recipe_id)
        except AppError as e:
            logger.warning(
                "Catalog popularity unavailable; counting local likes only",
                recipe_id=recipe_id,
                error=e.message,
            )
            return 0
