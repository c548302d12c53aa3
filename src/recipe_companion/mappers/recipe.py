"""Recipe-related data mappers.

This module contains functions for transforming catalog payloads into the
preview and details response shapes, and for attaching social state
(combined popularity, the caller's like) to them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from recipe_companion.schemas.recipe import (
    RecipeDetails,
    RecipePreview,
    RecipePreviewWithLikes,
)


if TYPE_CHECKING:
    from recipe_companion.clients.spoonacular.schemas import CatalogRecipe


def to_preview(recipe: CatalogRecipe) -> RecipePreview:
    """Build a preview from catalog metadata.

    ``popularity`` carries the catalog-reported like count until social
    state is attached.
    """
    return RecipePreview(
        id=recipe.id,
        title=recipe.title,
        ready_in_minutes=recipe.ready_in_minutes,
        image=recipe.image,
        popularity=recipe.aggregate_likes,
        vegan=recipe.vegan,
        vegetarian=recipe.vegetarian,
        gluten_free=recipe.gluten_free,
    )


def to_details(
    recipe: CatalogRecipe,
    *,
    total_likes: int,
    user_has_liked: bool,
) -> RecipeDetails:
    """Build the full details response for a catalog recipe.

    Args:
        recipe: Catalog metadata.
        total_likes: Combined popularity (catalog plus local likes).
        user_has_liked: Whether the caller likes the recipe.

    Returns:
        Details response with social state applied.
    """
    return RecipeDetails(
        **to_preview(recipe).model_dump(by_alias=False, exclude={"popularity"}),
        popularity=total_likes,
        ingredients=recipe.extended_ingredients,
        instructions=recipe.instructions,
        servings=recipe.servings,
        user_has_liked=user_has_liked,
    )


def with_social_state(
    preview: RecipePreview,
    *,
    total_likes: int,
    user_has_liked: bool,
) -> RecipePreviewWithLikes:
    """Attach combined popularity and like state to a preview."""
    return RecipePreviewWithLikes(
        **preview.model_dump(by_alias=False, exclude={"popularity"}),
        popularity=total_likes,
        user_has_liked=user_has_liked,
    )
