"""Unit test configuration.

Unit tests should be fast and isolated - no external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from recipe_companion.clients.spoonacular import CatalogRecipe


if TYPE_CHECKING:
    from collections.abc import Callable


pytestmark = pytest.mark.unit


@pytest.fixture
def mock_conn() -> AsyncMock:
    """Create a mock asyncpg connection."""
    conn = AsyncMock()
    conn.execute = AsyncMock(return_value="INSERT 0 1")
    conn.fetchval = AsyncMock(return_value=None)
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetch = AsyncMock(return_value=[])
    return conn


@pytest.fixture
def mock_pool(mock_conn: AsyncMock) -> MagicMock:
    """Create a mock asyncpg pool handing out ``mock_conn``."""
    pool = MagicMock()
    pool.close = AsyncMock()

    pool.acquire = MagicMock(return_value=AsyncMock())
    pool.acquire.return_value.__aenter__ = AsyncMock(return_value=mock_conn)
    pool.acquire.return_value.__aexit__ = AsyncMock(return_value=None)

    return pool


@pytest.fixture
def catalog_payload() -> Callable[..., dict[str, Any]]:
    """Build a Spoonacular ``information`` payload."""

    def _build(recipe_id: int = 716429, **overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": recipe_id,
            "title": f"Recipe {recipe_id}",
            "readyInMinutes": 45,
            "image": f"https://img.spoonacular.com/recipes/{recipe_id}.jpg",
            "aggregateLikes": 209,
            "vegan": False,
            "vegetarian": True,
            "glutenFree": False,
            "extendedIngredients": [
                {"id": 1001, "name": "butter", "amount": 1.0, "unit": "tbsp"},
            ],
            "instructions": "Melt the butter.",
            "servings": 2,
            "cuisines": ["italian"],
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def catalog_recipe(
    catalog_payload: Callable[..., dict[str, Any]],
) -> Callable[..., CatalogRecipe]:
    """Build a validated ``CatalogRecipe``."""

    def _build(recipe_id: int = 716429, **overrides: Any) -> CatalogRecipe:
        return CatalogRecipe.model_validate(catalog_payload(recipe_id, **overrides))

    return _build
