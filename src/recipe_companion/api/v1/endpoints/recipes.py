"""Catalog recipe endpoints.

Provides:
- GET /recipes/random for random previews
- GET /recipes/search for catalog search with optional filters
- GET /recipes/{recipeId} for full details with social state
- POST /recipes/{recipeId}/like to set or flip the caller's like
- GET /recipes/{recipeId}/likes for combined popularity and like state
"""

from __future__ import annotations

from typing import Annotated, Any, Final

from fastapi import APIRouter, Body, Path, Query, status
from pydantic import ValidationError as PydanticValidationError
from starlette.responses import Response

from recipe_companion.api.dependencies import Aggregator, LastSearch, Likes
from recipe_companion.auth.dependencies import OptionalUserId
from recipe_companion.clients.spoonacular import SearchFilters
from recipe_companion.core.exceptions import ValidationFailedError
from recipe_companion.observability.logging import get_logger
from recipe_companion.schemas import (
    LikeRequest,
    LikeResponse,
    LikeSummary,
    RecipeDetails,
    RecipePreviewWithLikes,
)


logger = get_logger(__name__)

router = APIRouter(prefix="/recipes", tags=["Recipes"])

SEARCH_LIMITS: Final[frozenset[int]] = frozenset({5, 10, 15})

RecipeId = Annotated[int, Path(alias="recipeId", ge=1)]


@router.get(
    "/random",
    response_model=list[RecipePreviewWithLikes],
    summary="Random recipes",
    description="Random catalog previews with combined popularity.",
)
async def get_random_recipes(
    aggregator: Aggregator,
    user_id: OptionalUserId,
) -> list[RecipePreviewWithLikes]:
    """Return random previews, enriched with the caller's like state."""
    return await aggregator.get_random(user_id=user_id)


@router.get(
    "/search",
    response_model=list[RecipePreviewWithLikes],
    summary="Search recipes",
    responses={
        204: {"description": "No matching recipes found"},
        400: {"description": "Missing query or unsupported result count"},
    },
)
async def search_recipes(
    aggregator: Aggregator,
    last_search: LastSearch,
    user_id: OptionalUserId,
    query: Annotated[str | None, Query()] = None,
    number: Annotated[int | None, Query(description="One of 5, 10 or 15")] = None,
    cuisine: Annotated[str | None, Query()] = None,
    diet: Annotated[str | None, Query()] = None,
    intolerance: Annotated[str | None, Query()] = None,
) -> list[RecipePreviewWithLikes] | Response:
    """Search the catalog.

    Results of an identified caller are remembered as their last search.
    """
    if number is not None and number not in SEARCH_LIMITS:
        raise ValidationFailedError(
            "number must be one of 5, 10 or 15",
            context={"operation": "search", "number": number},
        )

    results = await aggregator.search(
        query,
        limit=number,
        filters=SearchFilters(cuisine=cuisine, diet=diet, intolerance=intolerance),
        user_id=user_id,
    )

    if user_id is not None:
        await last_search.store(user_id, results)

    if not results:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return results


@router.get(
    "/{recipeId}",
    response_model=RecipeDetails,
    summary="Recipe details",
    responses={404: {"description": "Recipe not found"}},
)
async def get_recipe(
    recipe_id: RecipeId,
    aggregator: Aggregator,
    user_id: OptionalUserId,
) -> RecipeDetails:
    """Return full catalog details with combined popularity and like state."""
    return await aggregator.get_details(recipe_id, user_id)


@router.post(
    "/{recipeId}/like",
    response_model=LikeResponse,
    summary="Like or unlike a recipe",
    description="Send `like` to set the state; omit it to flip the current state.",
    responses={
        400: {"description": "like is not a boolean"},
        401: {"description": "Not logged in"},
    },
)
async def like_recipe(
    recipe_id: RecipeId,
    likes: Likes,
    user_id: OptionalUserId,
    body: Annotated[Any, Body(description='Optional {"like": bool}')] = None,
) -> LikeResponse:
    """Set or flip the caller's like and return the updated counts.

    A non-boolean ``like`` is a 400 validation failure.
    """
    try:
        desired = LikeRequest.model_validate(body or {}).like
    except PydanticValidationError as e:
        raise ValidationFailedError(
            "like must be a boolean",
            context={"operation": "toggle_like", "recipe_id": recipe_id},
        ) from e

    result = await likes.toggle(user_id, recipe_id, desired)
    total_likes = await likes.count_combined(recipe_id)

    return LikeResponse(
        liked=result.liked,
        total_likes=total_likes,
        user_has_liked=result.liked,
    )


@router.get(
    "/{recipeId}/likes",
    response_model=LikeSummary,
    summary="Like summary",
)
async def get_recipe_likes(
    recipe_id: RecipeId,
    likes: Likes,
    user_id: OptionalUserId,
) -> LikeSummary:
    """Return combined popularity and whether the caller likes the recipe."""
    return await likes.summary(recipe_id, user_id)
