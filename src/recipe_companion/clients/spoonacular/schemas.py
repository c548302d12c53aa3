"""Spoonacular response shapes.

Only the fields the service reads are declared; everything else in the
catalog payloads is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import Field

from recipe_companion.schemas.base import DownstreamResponse


class CatalogRecipe(DownstreamResponse):
    """Payload of ``GET /recipes/{id}/information``."""

    id: int
    title: str = ""
    ready_in_minutes: int | None = None
    image: str | None = None
    aggregate_likes: int = 0
    vegan: bool = False
    vegetarian: bool = False
    gluten_free: bool = False
    extended_ingredients: list[dict[str, Any]] = Field(default_factory=list)
    instructions: str | None = None
    servings: int | None = None


class CatalogSearchHit(DownstreamResponse):
    """One entry of a ``complexSearch`` result page."""

    id: int
    title: str = ""


class CatalogSearchResponse(DownstreamResponse):
    """Payload of ``GET /recipes/complexSearch``."""

    results: list[CatalogSearchHit] = Field(default_factory=list)
    total_results: int = 0


class CatalogRandomResponse(DownstreamResponse):
    """Payload of ``GET /recipes/random``."""

    recipes: list[CatalogRecipe] = Field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FailedRecipe:
    """Stand-in for a batch item whose fetch failed."""

    id: int
    reason: str
    error: bool = True


@dataclass(frozen=True, slots=True)
class SearchFilters:
    """Optional narrowing for catalog search."""

    cuisine: str | None = None
    diet: str | None = None
    intolerance: str | None = None

    def as_params(self) -> dict[str, str]:
        """Query parameters for the filters that are set."""
        params: dict[str, str] = {}
        if self.cuisine:
            params["cuisine"] = self.cuisine
        if self.diet:
            params["diet"] = self.diet
        if self.intolerance:
            params["intolerances"] = self.intolerance
        return params
