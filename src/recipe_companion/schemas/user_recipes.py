"""Schemas for user-authored recipes (private and family)."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from recipe_companion.schemas.base import APIRequest, APIResponse
from recipe_companion.schemas.recipe import RecipePreview


class IngredientEntry(APIRequest):
    """One ``{name, amount}`` ingredient line, stored in list order."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str
    amount: str = ""


# =============================================================================
# Private recipes
# =============================================================================


class PrivateRecipeInput(APIRequest):
    """Fields accepted when authoring a private recipe.

    ``title`` and ``servings`` are required; the store checks them before
    any write so that a missing field is reported as a validation failure
    rather than a storage error.
    """

    title: str | None = None
    ready_in_minutes: int | None = None
    image: str | None = None
    popularity: int | None = None
    vegan: bool = False
    vegetarian: bool = False
    gluten_free: bool = False
    ingredients: list[IngredientEntry] | None = None
    instructions: str | None = None
    servings: int | None = None


class PrivateRecipeDetails(RecipePreview):
    """Full private recipe as returned to its owner."""

    ingredients: list[IngredientEntry] = Field(default_factory=list)
    instructions: str = ""
    servings: int


# =============================================================================
# Family recipes
# =============================================================================


class FamilyRecipeInput(APIRequest):
    """Fields accepted when recording a family recipe."""

    recipe_name: str | None = None
    owner_name: str | None = None
    when_to_prepare: str | None = None
    ingredients: list[IngredientEntry] | None = None
    instructions: str | None = None
    image_url: str | None = None


class FamilyRecipe(APIResponse):
    """A family recipe; ``owner`` is the credited family member."""

    id: int
    title: str
    image: str | None = None
    owner: str
    when: str | None = None
    ingredients: list[IngredientEntry] = Field(default_factory=list)
    instructions: str


class CreatedResponse(APIResponse):
    """Identifier of a newly created resource."""

    id: int
    message: str = "Recipe created"
