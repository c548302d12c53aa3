"""Spoonacular recipe catalog client package."""

from recipe_companion.clients.spoonacular.client import CatalogClient
from recipe_companion.clients.spoonacular.schemas import (
    CatalogRecipe,
    FailedRecipe,
    SearchFilters,
)


__all__ = [
    "CatalogClient",
    "CatalogRecipe",
    "FailedRecipe",
    "SearchFilters",
]
