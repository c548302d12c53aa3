"""Per-user endpoints.

Every route here is owner-scoped: calls without an identity fail with 401
before any storage access.

Provides:
- Favorites: add, list, remove
- Watch history: record a view, list all, list recent, clear
- Last search: the caller's most recent search results
- Private recipes: create, list, details, delete
- Family recipes: create, list (minimum display size), details, delete
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, status

from recipe_companion.api.dependencies import (
    Aggregator,
    FamilyRecipes,
    Favorites,
    LastSearch,
    PrivateRecipes,
    WatchHistory,
)
from recipe_companion.auth.dependencies import OptionalUserId
from recipe_companion.core.config import get_settings
from recipe_companion.database.stores.base import require_user
from recipe_companion.schemas import (
    ClearedResponse,
    CreatedResponse,
    FamilyRecipe,
    FamilyRecipeInput,
    FavoriteRequest,
    MessageResponse,
    PrivateRecipeDetails,
    PrivateRecipeInput,
    RecipePreview,
    RecipePreviewWithLikes,
    RemovedResponse,
)


router = APIRouter(prefix="/users", tags=["Users"])

RecipeId = Annotated[int, Path(alias="recipeId", ge=1)]


# =============================================================================
# Favorites
# =============================================================================


@router.post(
    "/favorites",
    response_model=MessageResponse,
    summary="Add a favorite",
    responses={409: {"description": "Recipe is already in favorites"}},
)
async def add_favorite(
    body: FavoriteRequest,
    favorites: Favorites,
    user_id: OptionalUserId,
) -> MessageResponse:
    """Save a catalog recipe as a favorite."""
    await favorites.add(user_id, body.recipe_id)
    return MessageResponse(message="The Recipe successfully saved as favorite")


@router.get(
    "/favorites",
    response_model=list[RecipePreviewWithLikes],
    summary="List favorites",
)
async def list_favorites(
    favorites: Favorites,
    aggregator: Aggregator,
    user_id: OptionalUserId,
) -> list[RecipePreviewWithLikes]:
    """Previews of the caller's favorite recipes."""
    recipe_ids = await favorites.list(user_id)
    return await aggregator.get_preview_batch(recipe_ids, user_id)


@router.delete(
    "/favorites/{recipeId}",
    response_model=RemovedResponse,
    summary="Remove a favorite",
)
async def remove_favorite(
    recipe_id: RecipeId,
    favorites: Favorites,
    user_id: OptionalUserId,
) -> RemovedResponse:
    """Remove a favorite; ``removed`` is False if it was not saved."""
    removed = await favorites.remove(user_id, recipe_id)
    message = "Recipe removed from favorites" if removed else "Recipe was not a favorite"
    return RemovedResponse(message=message, removed=removed)


# =============================================================================
# Watch history
# =============================================================================


@router.post(
    "/watched/{recipeId}",
    response_model=MessageResponse,
    summary="Mark a recipe as watched",
)
async def mark_watched(
    recipe_id: RecipeId,
    watch_history: WatchHistory,
    user_id: OptionalUserId,
) -> MessageResponse:
    """Record a view; viewing again only refreshes the timestamp."""
    await watch_history.record_view(user_id, recipe_id)
    return MessageResponse(message="Recipe marked as watched")


@router.get(
    "/watched",
    response_model=list[RecipePreviewWithLikes],
    summary="All watched recipes",
)
async def list_watched(
    watch_history: WatchHistory,
    aggregator: Aggregator,
    user_id: OptionalUserId,
) -> list[RecipePreviewWithLikes]:
    """Previews of every watched recipe, most recent first."""
    recipe_ids = await watch_history.list_all(user_id)
    return await aggregator.get_preview_batch(recipe_ids, user_id)


@router.get(
    "/watched/recent",
    response_model=list[RecipePreviewWithLikes],
    summary="Recently watched recipes",
)
async def list_recent_watched(
    watch_history: WatchHistory,
    aggregator: Aggregator,
    user_id: OptionalUserId,
) -> list[RecipePreviewWithLikes]:
    """Previews of the most recently watched recipes."""
    limit = get_settings().watch_history.recent_limit
    recipe_ids = await watch_history.list_recent(user_id, limit)
    return await aggregator.get_preview_batch(recipe_ids, user_id)


@router.delete(
    "/watched",
    response_model=ClearedResponse,
    summary="Clear watch history",
)
async def clear_watched(
    watch_history: WatchHistory,
    user_id: OptionalUserId,
) -> ClearedResponse:
    """Delete the caller's whole watch history."""
    deleted_count = await watch_history.clear_all(user_id)
    return ClearedResponse(
        message="Watched recipes history cleared",
        deleted_count=deleted_count,
    )


# =============================================================================
# Last search
# =============================================================================


@router.get(
    "/last-search",
    response_model=list[RecipePreviewWithLikes],
    summary="Last search results",
)
async def get_last_search(
    last_search: LastSearch,
    user_id: OptionalUserId,
) -> list[RecipePreviewWithLikes]:
    """Results of the caller's most recent search, or an empty list."""
    user_id = require_user(user_id, "last_search")
    return await last_search.load(user_id)


# =============================================================================
# Private recipes
# =============================================================================


@router.post(
    "/private-recipes",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a private recipe",
    responses={400: {"description": "Title or servings missing"}},
)
async def create_private_recipe(
    body: PrivateRecipeInput,
    store: PrivateRecipes,
    user_id: OptionalUserId,
) -> CreatedResponse:
    """Store a recipe visible only to the caller."""
    recipe_id = await store.create(user_id, body)
    return CreatedResponse(id=recipe_id)


@router.get(
    "/private-recipes",
    response_model=list[RecipePreview],
    summary="List private recipes",
)
async def list_private_recipes(
    store: PrivateRecipes,
    user_id: OptionalUserId,
) -> list[RecipePreview]:
    """Summaries of the caller's private recipes."""
    return await store.list(user_id)


@router.get(
    "/private-recipes/{recipeId}",
    response_model=PrivateRecipeDetails,
    summary="Private recipe details",
    responses={404: {"description": "Recipe not found"}},
)
async def get_private_recipe(
    recipe_id: RecipeId,
    store: PrivateRecipes,
    user_id: OptionalUserId,
) -> PrivateRecipeDetails:
    """Full private recipe; other users' recipes are reported as not found."""
    return await store.get_details(recipe_id, user_id)


@router.delete(
    "/private-recipes/{recipeId}",
    response_model=MessageResponse,
    summary="Delete a private recipe",
    responses={404: {"description": "Recipe not found"}},
)
async def delete_private_recipe(
    recipe_id: RecipeId,
    store: PrivateRecipes,
    user_id: OptionalUserId,
) -> MessageResponse:
    """Delete one of the caller's private recipes."""
    await store.delete(user_id, recipe_id)
    return MessageResponse(message="Recipe deleted")


# =============================================================================
# Family recipes
# =============================================================================


@router.post(
    "/family-recipes",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a family recipe",
    responses={400: {"description": "Required field missing"}},
)
async def create_family_recipe(
    body: FamilyRecipeInput,
    store: FamilyRecipes,
    user_id: OptionalUserId,
) -> CreatedResponse:
    """Record a family recipe credited to a family member."""
    recipe_id = await store.create(user_id, body)
    return CreatedResponse(id=recipe_id)


@router.get(
    "/family-recipes",
    response_model=list[FamilyRecipe],
    summary="List family recipes",
    responses={204: {"description": "Fewer recipes than the display minimum"}},
)
async def list_family_recipes(
    store: FamilyRecipes,
    user_id: OptionalUserId,
) -> list[FamilyRecipe]:
    """The caller's family recipes, once there are enough to display."""
    return await store.list_all(user_id)


@router.get(
    "/family-recipes/{recipeId}",
    response_model=FamilyRecipe,
    summary="Family recipe details",
    responses={404: {"description": "Recipe not found"}},
)
async def get_family_recipe(
    recipe_id: RecipeId,
    store: FamilyRecipes,
    user_id: OptionalUserId,
) -> FamilyRecipe:
    """One family recipe owned by the caller."""
    return await store.get_details(recipe_id, user_id)


@router.delete(
    "/family-recipes/{recipeId}",
    response_model=MessageResponse,
    summary="Delete a family recipe",
    responses={404: {"description": "Recipe not found"}},
)
async def delete_family_recipe(
    recipe_id: RecipeId,
    store: FamilyRecipes,
    user_id: OptionalUserId,
) -> MessageResponse:
    """Delete one of the caller's family recipes."""
    await store.delete(user_id, recipe_id)
    return MessageResponse(message="Recipe deleted")
