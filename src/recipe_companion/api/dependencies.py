"""FastAPI dependencies for service access.

Services and stores are built during application startup and stored in
``app.state``. Each dependency reads one of them and fails with 503 if
startup did not provide it.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status

from recipe_companion.cache.last_search import LastSearchCache
from recipe_companion.database.stores import (
    FamilyRecipeStore,
    FavoritesStore,
    PrivateRecipeStore,
    WatchHistoryStore,
)
from recipe_companion.services.aggregator import RecipeAggregator
from recipe_companion.services.likes import LikeEngine


def _from_state(request: Request, attribute: str, label: str) -> Any:
    """Fetch an initialized component from app state.

    Raises:
        HTTPException: 503 if the component is not initialized.
    """
    component = getattr(request.app.state, attribute, None)
    if component is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{label} not available",
        )
    return component


async def get_aggregator(request: Request) -> RecipeAggregator:
    """Get the recipe aggregator from app state."""
    return _from_state(request, "aggregator", "Recipe aggregator")


async def get_like_engine(request: Request) -> LikeEngine:
    """Get the like engine from app state."""
    return _from_state(request, "like_engine", "Like engine")


async def get_favorites_store(request: Request) -> FavoritesStore:
    """Get the favorites store from app state."""
    return _from_state(request, "favorites_store", "Favorites store")


async def get_watch_history_store(request: Request) -> WatchHistoryStore:
    """Get the watch history store from app state."""
    return _from_state(request, "watch_history_store", "Watch history store")


async def get_private_recipe_store(request: Request) -> PrivateRecipeStore:
    """Get the private recipe store from app state."""
    return _from_state(request, "private_recipe_store", "Private recipe store")


async def get_family_recipe_store(request: Request) -> FamilyRecipeStore:
    """Get the family recipe store from app state."""
    return _from_state(request, "family_recipe_store", "Family recipe store")


async def get_last_search_cache(request: Request) -> LastSearchCache:
    """Get the last search cache from app state."""
    return _from_state(request, "last_search_cache", "Last search cache")


Aggregator = Annotated[RecipeAggregator, Depends(get_aggregator)]
Likes = Annotated[LikeEngine, Depends(get_like_engine)]
Favorites = Annotated[FavoritesStore, Depends(get_favorites_store)]
WatchHistory = Annotated[WatchHistoryStore, Depends(get_watch_history_store)]
PrivateRecipes = Annotated[PrivateRecipeStore, Depends(get_private_recipe_store)]
FamilyRecipes = Annotated[FamilyRecipeStore, Depends(get_family_recipe_store)]
LastSearch = Annotated[LastSearchCache, Depends(get_last_search_cache)]
