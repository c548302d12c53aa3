"""Pydantic schemas for request/response handling."""

from recipe_companion.schemas.likes import (
    LikeRequest,
    LikeResponse,
    LikeSummary,
    LikeToggleResult,
)
from recipe_companion.schemas.recipe import (
    RecipeDetails,
    RecipePreview,
    RecipePreviewWithLikes,
)
from recipe_companion.schemas.user_recipes import (
    CreatedResponse,
    FamilyRecipe,
    FamilyRecipeInput,
    IngredientEntry,
    PrivateRecipeDetails,
    PrivateRecipeInput,
)
from recipe_companion.schemas.users import (
    ClearedResponse,
    FavoriteRequest,
    MessageResponse,
    RemovedResponse,
)


__all__ = [
    "ClearedResponse",
    "CreatedResponse",
    "FamilyRecipe",
    "FamilyRecipeInput",
    "FavoriteRequest",
    "IngredientEntry",
    "LikeRequest",
    "LikeResponse",
    "LikeSummary",
    "LikeToggleResult",
    "MessageResponse",
    "PrivateRecipeDetails",
    "PrivateRecipeInput",
    "RecipeDetails",
    "RecipePreview",
    "RecipePreviewWithLikes",
    "RemovedResponse",
]
