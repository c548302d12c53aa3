"""Spoonacular recipe catalog client.

Single-item calls surface failures directly (``NotFoundError`` for an
unknown id, ``UpstreamError`` for everything else). Batch calls fan out
concurrently and replace failing items with ``FailedRecipe`` placeholders,
which the preview helpers filter out before returning.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Final, TypeVar

import httpx
import orjson
from pydantic import BaseModel, ValidationError

from recipe_companion.clients.spoonacular.schemas import (
    CatalogRandomResponse,
    CatalogRecipe,
    CatalogSearchResponse,
    FailedRecipe,
    SearchFilters,
)
from recipe_companion.core.config import get_settings
from recipe_companion.core.exceptions import (
    AppError,
    MissingQueryError,
    NotFoundError,
    UpstreamError,
)
from recipe_companion.mappers.recipe import to_preview
from recipe_companion.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Sequence

    from recipe_companion.core.config.settings import CatalogSettings
    from recipe_companion.schemas.recipe import RecipePreview

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class CatalogClient:
    """HTTP client for the Spoonacular recipes API.

    Example:
        ```python
        client = CatalogClient()
        await client.initialize()

        recipe = await client.fetch_by_id(716429)
        previews = await client.search("pasta", limit=10)

        await client.shutdown()
        ```
    """

    INFORMATION_PATH: Final[str] = "/{recipe_id}/information"
    RANDOM_PATH: Final[str] = "/random"
    SEARCH_PATH: Final[str] = "/complexSearch"

    def __init__(
        self,
        settings: CatalogSettings | None = None,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Catalog settings. Defaults to the application settings.
            api_key: Spoonacular API key. Defaults to ``SPOONACULAR_API_KEY``.
            http_client: HTTP client to use instead of creating one.
        """
        if settings is None or api_key is None:
            app_settings = get_settings()
            settings = settings or app_settings.catalog
            api_key = app_settings.SPOONACULAR_API_KEY if api_key is None else api_key

        self._settings = settings
        self._api_key = api_key
        self._http = http_client
        self._owns_http_client = http_client is None

    @property
    def base_url(self) -> str:
        """Base URL of the recipes API."""
        return self._settings.base_url.rstrip("/")

    async def initialize(self) -> None:
        """Create the HTTP client if one was not provided."""
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.timeout),
                headers={"Accept": "application/json"},
            )
        logger.info("CatalogClient initialized", base_url=self.base_url)

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.debug("CatalogClient shutdown")

    # =========================================================================
    # Single-item calls
    # =========================================================================

    async def fetch_by_id(self, recipe_id: int) -> CatalogRecipe:
        """Full metadata for one recipe.

        Raises:
            NotFoundError: If the catalog does not know the id.
            UpstreamError: If the catalog is unreachable or misbehaves.
        """
        data = await self._get(
            self.INFORMATION_PATH.format(recipe_id=recipe_id),
            {"includeNutrition": False},
            recipe_id=recipe_id,
        )
        return self._validate(CatalogRecipe, data, recipe_id=recipe_id)

    async def popularity(self, recipe_id: int) -> int:
        """Catalog-reported like count for one recipe."""
        recipe = await self.fetch_by_id(recipe_id)
        return recipe.aggregate_likes

    async def fetch_random(self, count: int | None = None) -> list[RecipePreview]:
        """Random recipe previews; ``count`` defaults to the configured value."""
        number = count or self._settings.random_count
        data = await self._get(self.RANDOM_PATH, {"number": number})
        response = self._validate(CatalogRandomResponse, data)
        return [to_preview(recipe) for recipe in response.recipes]

    async def search(
        self,
        query: str | None,
        limit: int | None = None,
        filters: SearchFilters | None = None,
    ) -> list[RecipePreview]:
        """Search the catalog and return previews of the hits.

        ``limit`` is expected to be already validated by the caller.

        Raises:
            MissingQueryError: If ``query`` is empty.
            UpstreamError: If the search call itself fails.
        """
        if not query:
            raise MissingQueryError

        params: dict[str, Any] = {
            "query": query,
            "number": limit or self._settings.default_search_limit,
            "instructionsRequired": True,
        }
        if filters is not None:
            params.update(filters.as_params())

        data = await self._get(self.SEARCH_PATH, params)
        response = self._validate(CatalogSearchResponse, data)

        if response.total_results == 0 or not response.results:
            logger.debug("Catalog search returned no results", query=query)
            return []

        return await self.fetch_previews([hit.id for hit in response.results])

    # =========================================================================
    # Batch calls
    # =========================================================================

    async def fetch_many(
        self,
        recipe_ids: Sequence[int],
    ) -> list[CatalogRecipe | FailedRecipe]:
        """Fetch several recipes concurrently.

        Results keep the order of ``recipe_ids``. A failing item becomes a
        ``FailedRecipe`` and never fails the batch.
        """
        return list(
            await asyncio.gather(
                *(self._fetch_or_placeholder(recipe_id) for recipe_id in recipe_ids)
            )
        )

    async def fetch_previews(self, recipe_ids: Sequence[int]) -> list[RecipePreview]:
        """Previews for the ids that could be fetched, in request order."""
        fetched = await self.fetch_many(recipe_ids)
        return [
            to_preview(recipe)
            for recipe in fetched
            if not isinstance(recipe, FailedRecipe)
        ]

    async def _fetch_or_placeholder(
        self,
        recipe_id: int,
    ) -> CatalogRecipe | FailedRecipe:
        try:
            return await self.fetch_by_id(recipe_id)
        except AppError as e:
            logger.warning(
                "Failed to fetch recipe; dropping it from the batch",
                recipe_id=recipe_id,
                error=e.message,
            )
            return FailedRecipe(id=recipe_id, reason=e.message)

    # =========================================================================
    # Transport
    # =========================================================================

    async def _get(
        self,
        path: str,
        params: dict[str, Any],
        *,
        recipe_id: int | None = None,
    ) -> Any:
        """GET a catalog path and return the decoded JSON body."""
        if self._http is None:
            msg = "Client not initialized. Call initialize() first."
            raise RuntimeError(msg)

        url = f"{self.base_url}{path}"
        context: dict[str, Any] = {"operation": "catalog_get", "path": path}
        if recipe_id is not None:
            context["recipe_id"] = recipe_id

        try:
            response = await self._http.get(
                url,
                params={**params, "apiKey": self._api_key},
            )
        except httpx.TimeoutException as e:
            logger.warning("Request to catalog timed out", path=path)
            msg = "Recipe catalog timed out"
            raise UpstreamError(msg, context=context) from e
        except httpx.HTTPError as e:
            logger.warning("Failed to reach catalog", path=path, error=str(e))
            msg = "Recipe catalog is unavailable"
            raise UpstreamError(msg, context=context) from e

        if response.status_code == 404 and recipe_id is not None:
            raise NotFoundError("Recipe", recipe_id)

        if response.is_error:
            logger.warning(
                "Catalog returned error",
                path=path,
                status_code=response.status_code,
            )
            msg = f"Recipe catalog returned HTTP {response.status_code}"
            raise UpstreamError(
                msg, context={**context, "status_code": response.status_code}
            )

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            msg = "Recipe catalog returned malformed JSON"
            raise UpstreamError(msg, context=context) from e

    @staticmethod
    def _validate(
        model: type[T],
        data: Any,
        **context: Any,
    ) -> T:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(
                "Unexpected catalog payload",
                schema=model.__name__,
                error=str(e),
                **context,
            )
            msg = "Recipe catalog returned an unexpected payload"
            raise UpstreamError(msg, context=context) from e
