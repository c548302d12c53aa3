"""Catalog recipe response shapes.

Field names are a compatibility contract with existing consumers:
``id, title, readyInMinutes, image, popularity, vegan, vegetarian,
glutenFree`` plus, for details, ``ingredients, instructions, servings,
userHasLiked``.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from recipe_companion.schemas.base import APIResponse


class RecipePreview(APIResponse):
    """Abbreviated recipe record (no ingredients or instructions)."""

    id: int
    title: str
    ready_in_minutes: int | None = None
    image: str | None = None
    popularity: int = 0
    vegan: bool = False
    vegetarian: bool = False
    gluten_free: bool = False


class RecipePreviewWithLikes(RecipePreview):
    """Preview enriched with combined popularity and the caller's like state."""

    user_has_liked: bool = False


class RecipeDetails(RecipePreview):
    """Full catalog recipe with social state."""

    ingredients: list[dict[str, Any]] = Field(default_factory=list)
    instructions: str | None = None
    servings: int | None = None
    user_has_liked: bool = False
