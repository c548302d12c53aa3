"""Family recipe store.

Owner-scoped CRUD plus a display rule: a collection is only handed out
once it holds at least ``min_display_count`` recipes. Below that the
caller gets ``InsufficientContentError`` ("come back later"), which is
not the same thing as an empty collection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from recipe_companion.core.exceptions import (
    InsufficientContentError,
    NotFoundError,
    ValidationFailedError,
)
from recipe_companion.database.stores.base import (
    BaseStore,
    UserId,
    affected_rows,
    decode_ingredients,
    encode_ingredients,
    require_user,
)
from recipe_companion.observability.logging import get_logger
from recipe_companion.schemas.user_recipes import FamilyRecipe, FamilyRecipeInput


if TYPE_CHECKING:
    from asyncpg import Pool, Record

logger = get_logger(__name__)

DEFAULT_MIN_DISPLAY_COUNT = 3

_RESOURCE = "Family recipe"

_INSERT = """
    INSERT INTO family_recipes (
        user_id, recipe_name, owner_name, when_to_prepare,
        ingredients, instructions, image_url
    )
    VALUES ($1, $2, $3, $4, $5, $6, $7)
    RETURNING recipe_id
"""


class FamilyRecipeStore(BaseStore):
    """Family recipes recorded by a user and credited to a family member."""

    def __init__(
        self,
        pool: Pool | None = None,
        min_display_count: int = DEFAULT_MIN_DISPLAY_COUNT,
    ) -> None:
        super().__init__(pool)
        self.min_display_count = min_display_count

    async def create(self, user_id: UserId | None, fields: FamilyRecipeInput) -> int:
        """Store a new family recipe and return its id.

        ``when_to_prepare`` and ``image_url`` are optional; everything else
        is required.
        """
        user_id = require_user(user_id, "create_family_recipe")

        required = (
            ("recipe_name", fields.recipe_name),
            ("owner_name", fields.owner_name),
            ("ingredients", fields.ingredients),
            ("instructions", fields.instructions),
        )
        missing = [name for name, value in required if value is None or value == ""]
        if missing:
            raise ValidationFailedError(
                "Missing required parameters",
                missing_fields=missing,
                context={"operation": "create_family_recipe", "user_id": user_id},
            )

        with self.storage_errors("create_family_recipe", user_id=user_id):
            async with self.pool.acquire() as conn:
                recipe_id = await conn.fetchval(
                    _INSERT,
                    user_id,
                    fields.recipe_name,
                    fields.owner_name,
                    fields.when_to_prepare,
                    encode_ingredients(fields.ingredients),
                    fields.instructions,
                    fields.image_url or None,
                )

        logger.info("Family recipe created", user_id=user_id, recipe_id=recipe_id)
        return int(recipe_id)

    async def list_all(self, user_id: UserId | None) -> list[FamilyRecipe]:
        """The user's whole collection, if it is large enough to display.

        Raises:
            UnauthorizedError: If no identity is present.
            InsufficientContentError: If fewer than ``min_display_count``
                recipes are stored.
        """
        user_id = require_user(user_id, "list_family_recipes")

        with self.storage_errors("list_family_recipes", user_id=user_id):
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    "SELECT * FROM family_recipes "
                    "WHERE user_id = $1 ORDER BY recipe_id",
                    user_id,
                )

        if len(rows) < self.min_display_count:
            raise InsufficientContentError(
                f"There are less than {self.min_display_count} family recipes",
                available=len(rows),
                required=self.min_display_count,
            )

        recipes = []
        for row in rows:
            try:
                recipes.append(self._row_to_recipe(row))
            except ValueError:
                logger.warning(
                    "Stored ingredients could not be parsed; listing without them",
                    recipe_id=row["recipe_id"],
                    user_id=user_id,
                )
                recipes.append(self._row_to_recipe(row, parse_ingredients=False))
        return recipes

    async def get_details(
        self,
        recipe_id: int,
        user_id: UserId | None,
    ) -> FamilyRecipe:
        """One family recipe for its owner; ``NotFoundError`` otherwise."""
        user_id = require_user(user_id, "get_family_recipe")

        with self.storage_errors(
            "get_family_recipe", user_id=user_id, recipe_id=recipe_id
        ):
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    "SELECT * FROM family_recipes "
                    "WHERE recipe_id = $1 AND user_id = $2",
                    recipe_id,
                    user_id,
                )

        if row is None:
            raise NotFoundError(_RESOURCE, recipe_id)

        try:
            return self._row_to_recipe(row)
        except ValueError:
            logger.warning(
                "Stored ingredients could not be parsed",
                recipe_id=recipe_id,
                user_id=user_id,
            )
            raise NotFoundError(_RESOURCE, recipe_id) from None

    async def delete(self, user_id: UserId | None, recipe_id: int) -> bool:
        """Delete a family recipe owned by the user.

        Ownership is part of the delete predicate, so absence and mismatch
        both surface as ``NotFoundError``.
        """
        user_id = require_user(user_id, "delete_family_recipe")

        with self.storage_errors(
            "delete_family_recipe", user_id=user_id, recipe_id=recipe_id
        ):
            async with self.pool.acquire() as conn:
                status = await conn.execute(
                    "DELETE FROM family_recipes "
                    "WHERE recipe_id = $1 AND user_id = $2",
                    recipe_id,
                    user_id,
                )

        if affected_rows(status) == 0:
            raise NotFoundError(_RESOURCE, recipe_id)

        logger.info("Family recipe deleted", user_id=user_id, recipe_id=recipe_id)
        return True

    @staticmethod
    def _row_to_recipe(row: Record, *, parse_ingredients: bool = True) -> FamilyRecipe:
        """Convert database row to FamilyRecipe."""
        return FamilyRecipe(
            id=row["recipe_id"],
            title=row["recipe_name"],
            image=row["image_url"],
            owner=row["owner_name"],
            when=row["when_to_prepare"],
            ingredients=(
                decode_ingredients(row["ingredients"]) if parse_ingredients else []
            ),
            instructions=row["instructions"],
        )
