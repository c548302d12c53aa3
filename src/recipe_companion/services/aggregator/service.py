"""Recipe aggregator.

Composes the catalog client with the like engine to produce recipes with
social state. Enrichment is per item and concurrent; a failed popularity
or like lookup degrades that item to safe defaults instead of dropping it.
Only a failed base metadata fetch removes a recipe from a batch.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from recipe_companion.mappers.recipe import to_details, with_social_state
from recipe_companion.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Sequence

    from recipe_companion.clients.spoonacular import CatalogClient, SearchFilters
    from recipe_companion.database.stores.base import UserId
    from recipe_companion.schemas.recipe import (
        RecipeDetails,
        RecipePreview,
        RecipePreviewWithLikes,
    )
    from recipe_companion.services.likes import LikeEngine

logger = get_logger(__name__)


class RecipeAggregator:
    """Catalog recipes enriched with combined popularity and like state."""

    def __init__(self, catalog: CatalogClient, likes: LikeEngine) -> None:
        """Initialize the aggregator.

        Args:
            catalog: Client for the external recipe catalog.
            likes: Like engine for local likes and the caller's like state.
        """
        self._catalog = catalog
        self._likes = likes

    async def get_details(
        self,
        recipe_id: int,
        user_id: UserId | None = None,
    ) -> RecipeDetails:
        """Full recipe with social state.

        Raises:
            NotFoundError: If the catalog does not know the recipe.
            UpstreamError: If the catalog call fails.
        """
        recipe = await self._catalog.fetch_by_id(recipe_id)

        total_likes, user_has_liked = await asyncio.gather(
            self._total_likes(recipe.id, recipe.aggregate_likes),
            self._likes.has_liked(user_id, recipe.id),
        )
        return to_details(
            recipe,
            total_likes=total_likes,
            user_has_liked=user_has_liked,
        )

    async def get_preview_batch(
        self,
        recipe_ids: Sequence[int],
        user_id: UserId | None = None,
    ) -> list[RecipePreviewWithLikes]:
        """Enriched previews for the ids that could be fetched."""
        previews = await self._catalog.fetch_previews(recipe_ids)
        return await self._enrich(previews, user_id)

    async def get_random(
        self,
        count: int | None = None,
        user_id: UserId | None = None,
    ) -> list[RecipePreviewWithLikes]:
        """Enriched random previews."""
        previews = await self._catalog.fetch_random(count)
        return await self._enrich(previews, user_id)

    async def search(
        self,
        query: str | None,
        limit: int | None = None,
        filters: SearchFilters | None = None,
        user_id: UserId | None = None,
    ) -> list[RecipePreviewWithLikes]:
        """Enriched search results.

        Raises:
            MissingQueryError: If ``query`` is empty.
        """
        previews = await self._catalog.search(query, limit, filters)
        return await self._enrich(previews, user_id)

    async def _enrich(
        self,
        previews: Sequence[RecipePreview],
        user_id: UserId | None,
    ) -> list[RecipePreviewWithLikes]:
        return list(
            await asyncio.gather(
                *(self._enrich_one(preview, user_id) for preview in previews)
            )
        )

    async def _enrich_one(
        self,
        preview: RecipePreview,
        user_id: UserId | None,
    ) -> RecipePreviewWithLikes:
        total_likes, user_has_liked = await asyncio.gather(
            self._total_likes(preview.id, preview.popularity),
            self._likes.has_liked(user_id, preview.id),
        )
        return with_social_state(
            preview,
            total_likes=total_likes,
            user_has_liked=user_has_liked,
        )

    async def _total_likes(self, recipe_id: int, catalog_popularity: int) -> int:
        """Combined popularity, falling back to the catalog figure alone."""
        try:
            return await self._likes.count_combined(
                recipe_id, catalog_popularity=catalog_popularity
            )
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Local like count unavailable; using catalog popularity",
                recipe_id=recipe_id,
                error=str(e),
            )
            return catalog_popularity
