"""Private recipe store: owner-scoped CRUD for user-authored recipes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from recipe_companion.core.exceptions import NotFoundError, ValidationFailedError
from recipe_companion.database.stores.base import (
    BaseStore,
    UserId,
    affected_rows,
    decode_ingredients,
    encode_ingredients,
    require_user,
)
from recipe_companion.observability.logging import get_logger
from recipe_companion.schemas.recipe import RecipePreview
from recipe_companion.schemas.user_recipes import (
    PrivateRecipeDetails,
    PrivateRecipeInput,
)


if TYPE_CHECKING:
    from asyncpg import Record

logger = get_logger(__name__)

_RESOURCE = "Private recipe"

_INSERT = """
    INSERT INTO private_recipes (
        user_id, title, ready_in_minutes, image_url, popularity,
        vegan, vegetarian, gluten_free, ingredients, instructions, servings
    )
    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
    RETURNING recipe_id
"""

_SUMMARY_COLUMNS = (
    "recipe_id, title, ready_in_minutes, image_url, popularity, "
    "vegan, vegetarian, gluten_free"
)


class PrivateRecipeStore(BaseStore):
    """Recipes visible only to their author.

    Reads and deletes by anyone other than the owner report ``NotFoundError``,
    exactly as if the recipe did not exist.
    """

    async def create(
        self,
        user_id: UserId | None,
        fields: PrivateRecipeInput,
    ) -> int:
        """Store a new private recipe and return its id.

        Raises:
            UnauthorizedError: If no identity is present.
            ValidationFailedError: If title or servings is missing.
        """
        user_id = require_user(user_id, "create_private_recipe")

        missing = [
            name
            for name, value in (("title", fields.title), ("servings", fields.servings))
            if not value
        ]
        if missing:
            raise ValidationFailedError(
                "Missing required parameters",
                missing_fields=missing,
                context={"operation": "create_private_recipe", "user_id": user_id},
            )

        with self.storage_errors("create_private_recipe", user_id=user_id):
            async with self.pool.acquire() as conn:
                recipe_id = await conn.fetchval(
                    _INSERT,
                    user_id,
                    fields.title,
                    fields.ready_in_minutes or 0,
                    fields.image or "",
                    fields.popularity or 0,
                    fields.vegan,
                    fields.vegetarian,
                    fields.gluten_free,
                    encode_ingredients(fields.ingredients),
                    fields.instructions or "",
                    fields.servings,
                )

        logger.info("Private recipe created", user_id=user_id, recipe_id=recipe_id)
        return int(recipe_id)

    async def list(self, user_id: UserId | None) -> list[RecipePreview]:
        """Summaries of the user's own private recipes."""
        user_id = require_user(user_id, "list_private_recipes")

        with self.storage_errors("list_private_recipes", user_id=user_id):
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    f"SELECT {_SUMMARY_COLUMNS} FROM private_recipes "
                    "WHERE user_id = $1 ORDER BY recipe_id",
                    user_id,
                )
        return [self._row_to_summary(row) for row in rows]

    async def get_details(
        self,
        recipe_id: int,
        user_id: UserId | None,
    ) -> PrivateRecipeDetails:
        """Full recipe for its owner.

        Raises:
            UnauthorizedError: If no identity is present.
            NotFoundError: If the recipe is absent, owned by another user, or
                its stored ingredient list cannot be parsed.
        """
        user_id = require_user(user_id, "get_private_recipe")

        with self.storage_errors(
            "get_private_recipe", user_id=user_id, recipe_id=recipe_id
        ):
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    "SELECT * FROM private_recipes "
                    "WHERE recipe_id = $1 AND user_id = $2",
                    recipe_id,
                    user_id,
                )

        if row is None:
            raise NotFoundError(_RESOURCE, recipe_id)

        try:
            ingredients = decode_ingredients(row["ingredients"])
        except ValueError:
            # Corrupt data is reported as absent data
            logger.warning(
                "Stored ingredients could not be parsed",
                recipe_id=recipe_id,
                user_id=user_id,
            )
            raise NotFoundError(_RESOURCE, recipe_id) from None

        summary = self._row_to_summary(row)
        return PrivateRecipeDetails(
            **summary.model_dump(by_alias=False),
            ingredients=ingredients,
            instructions=row["instructions"] or "",
            servings=row["servings"],
        )

    async def delete(self, user_id: UserId | None, recipe_id: int) -> bool:
        """Delete one of the user's private recipes.

        Raises:
            NotFoundError: If the recipe is absent or owned by another user.
        """
        user_id = require_user(user_id, "delete_private_recipe")

        with self.storage_errors(
            "delete_private_recipe", user_id=user_id, recipe_id=recipe_id
        ):
            async with self.pool.acquire() as conn:
                status = await conn.execute(
                    "DELETE FROM private_recipes "
                    "WHERE recipe_id = $1 AND user_id = $2",
                    recipe_id,
                    user_id,
                )

        if affected_rows(status) == 0:
            raise NotFoundError(_RESOURCE, recipe_id)

        logger.info("Private recipe deleted", user_id=user_id, recipe_id=recipe_id)
        return True

    @staticmethod
    def _row_to_summary(row: Record) -> RecipePreview:
        """Convert database row to a preview-shaped summary."""
        return RecipePreview(
            id=row["recipe_id"],
            title=row["title"],
            ready_in_minutes=row["ready_in_minutes"],
            image=row["image_url"],
            popularity=row["popularity"] or 0,
            vegan=bool(row["vegan"]),
            vegetarian=bool(row["vegetarian"]),
            gluten_free=bool(row["gluten_free"]),
        )
