"""Integration tests for the per-user stores against real PostgreSQL."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest

from recipe_companion.core.exceptions import (
    ConflictError,
    InsufficientContentError,
    NotFoundError,
)
from recipe_companion.database.stores import (
    FamilyRecipeStore,
    FavoritesStore,
    LikeStore,
    PrivateRecipeStore,
    WatchHistoryStore,
)
from recipe_companion.schemas import (
    FamilyRecipeInput,
    IngredientEntry,
    PrivateRecipeInput,
)
from recipe_companion.services.likes import LikeEngine


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from asyncpg import Pool


pytestmark = pytest.mark.integration


class TestWatchHistory:
    """Upsert-on-view and recency ordering."""

    async def test_repeat_view_keeps_one_row(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should refresh the timestamp instead of adding a row."""
        store = WatchHistoryStore(pool=pool)
        user_id = await make_user()
        first = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        second = first + timedelta(hours=1)

        await store.record_view(user_id, 42, first)
        await store.record_view(user_id, 42, second)

        async with pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT watched_at FROM watched_recipes WHERE user_id = $1", user_id
            )
        assert len(rows) == 1
        assert rows[0]["watched_at"] == second

    async def test_most_recent_first(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should list newest views first and bound the recent list."""
        store = WatchHistoryStore(pool=pool)
        user_id = await make_user()
        start = datetime(2024, 5, 1, tzinfo=UTC)
        for offset, recipe_id in enumerate([10, 20, 30, 40]):
            await store.record_view(user_id, recipe_id, start + timedelta(minutes=offset))
        await store.record_view(user_id, 10, start + timedelta(hours=1))

        assert await store.list_all(user_id) == [10, 40, 30, 20]
        assert await store.list_recent(user_id, 3) == [10, 40, 30]

    async def test_clear_all(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should delete only the caller's history."""
        store = WatchHistoryStore(pool=pool)
        user_id = await make_user()
        other_id = await make_user()
        await store.record_view(user_id, 1)
        await store.record_view(user_id, 2)
        await store.record_view(other_id, 1)

        assert await store.clear_all(user_id) == 2
        assert await store.list_all(user_id) == []
        assert await store.list_all(other_id) == [1]


class TestFavorites:
    """Favorite uniqueness and removal."""

    async def test_add_remove_cycle(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should reject duplicates and report removals accurately."""
        store = FavoritesStore(pool=pool)
        user_id = await make_user()

        await store.add(user_id, 716429)
        with pytest.raises(ConflictError):
            await store.add(user_id, 716429)

        assert await store.list(user_id) == [716429]
        assert await store.remove(user_id, 716429) is True
        assert await store.remove(user_id, 716429) is False
        assert await store.list(user_id) == []


class TestLikes:
    """Like state convergence and combined counts."""

    async def test_set_liked_is_idempotent(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should leave exactly one row after liking twice."""
        engine = LikeEngine(store=LikeStore(pool=pool))
        user_id = await make_user()

        await engine.toggle(user_id, 9001, desired=True)
        await engine.toggle(user_id, 9001, desired=True)

        assert await LikeStore(pool=pool).count(9001) == 1

        await engine.toggle(user_id, 9001, desired=False)
        await engine.toggle(user_id, 9001, desired=False)

        assert await LikeStore(pool=pool).count(9001) == 0

    async def test_flip_alternates(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should alternate between liked and unliked."""
        engine = LikeEngine(store=LikeStore(pool=pool))
        user_id = await make_user()

        states = [(await engine.toggle(user_id, 9002)).liked for _ in range(3)]

        assert states == [True, False, True]
        assert await engine.has_liked(user_id, 9002) is True

    async def test_concurrent_likes_leave_one_row(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should converge under concurrent identical requests."""
        store = LikeStore(pool=pool)
        user_id = await make_user()

        await asyncio.gather(*(store.set_liked(user_id, 9003, True) for _ in range(5)))

        assert await store.count(9003) == 1

    async def test_count_combined(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should add local likes to the catalog figure."""
        catalog = MagicMock()
        catalog.popularity = AsyncMock(return_value=10)
        engine = LikeEngine(store=LikeStore(pool=pool), catalog=catalog)
        user_id = await make_user()

        await engine.toggle(user_id, 9004, desired=True)

        assert await engine.count_combined(9004) == 11
        summary = await engine.summary(9004, user_id)
        assert summary.total_likes == 11
        assert summary.user_has_liked is True


class TestPrivateRecipes:
    """Owner-only visibility of private recipes."""

    async def test_soup_round_trip_and_isolation(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should be visible to its owner only, and gone after deletion."""
        store = PrivateRecipeStore(pool=pool)
        owner = await make_user()
        stranger = await make_user()

        recipe_id = await store.create(
            owner,
            PrivateRecipeInput(
                title="Soup",
                servings=4,
                ingredients=[IngredientEntry(name="Carrots", amount="3")],
                instructions="Simmer for an hour.",
            ),
        )

        details = await store.get_details(recipe_id, owner)
        assert details.title == "Soup"
        assert details.servings == 4
        assert details.ingredients == [IngredientEntry(name="Carrots", amount="3")]
        assert [s.id for s in await store.list(owner)] == [recipe_id]

        with pytest.raises(NotFoundError):
            await store.get_details(recipe_id, stranger)
        with pytest.raises(NotFoundError):
            await store.delete(stranger, recipe_id)
        assert await store.list(stranger) == []

        assert await store.delete(owner, recipe_id) is True
        with pytest.raises(NotFoundError):
            await store.get_details(recipe_id, owner)

    async def test_recipe_without_ingredients(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should read back a title-and-servings recipe with no ingredients."""
        store = PrivateRecipeStore(pool=pool)
        owner = await make_user()
        stranger = await make_user()

        recipe_id = await store.create(owner, PrivateRecipeInput(title="Soup", servings=4))

        details = await store.get_details(recipe_id, owner)
        assert details.id == recipe_id
        assert details.title == "Soup"
        assert details.servings == 4
        assert details.ingredients == []

        with pytest.raises(NotFoundError):
            await store.get_details(recipe_id, stranger)

    async def test_corrupt_ingredients_read_as_absent(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should report unparsable stored data as not found."""
        store = PrivateRecipeStore(pool=pool)
        owner = await make_user()
        recipe_id = await store.create(owner, PrivateRecipeInput(title="Stew", servings=2))
        async with pool.acquire() as conn:
            await conn.execute(
                "UPDATE private_recipes SET ingredients = 'oops' WHERE recipe_id = $1",
                recipe_id,
            )

        with pytest.raises(NotFoundError):
            await store.get_details(recipe_id, owner)


class TestFamilyRecipes:
    """Minimum display size and ownership."""

    @staticmethod
    def _recipe(name: str) -> FamilyRecipeInput:
        return FamilyRecipeInput(
            recipe_name=name,
            owner_name="Grandma Sarah",
            ingredients=[
                IngredientEntry(name="Apples", amount="6"),
                IngredientEntry(name="Sugar", amount="1 cup"),
            ],
            instructions="Bake.",
        )

    async def test_display_threshold(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should refuse to list fewer than three recipes."""
        store = FamilyRecipeStore(pool=pool)
        user_id = await make_user()

        await store.create(user_id, self._recipe("Pie"))
        await store.create(user_id, self._recipe("Hummus"))
        with pytest.raises(InsufficientContentError):
            await store.list_all(user_id)

        await store.create(user_id, self._recipe("Soup"))
        recipes = await store.list_all(user_id)

        assert [r.title for r in recipes] == ["Pie", "Hummus", "Soup"]
        assert recipes[0].ingredients[1] == IngredientEntry(name="Sugar", amount="1 cup")

    async def test_delete_is_owner_scoped(
        self, pool: Pool, make_user: Callable[[], Awaitable[int]]
    ) -> None:
        """Should not let another user delete the recipe."""
        store = FamilyRecipeStore(pool=pool)
        owner = await make_user()
        stranger = await make_user()
        recipe_id = await store.create(owner, self._recipe("Pie"))

        with pytest.raises(NotFoundError):
            await store.delete(stranger, recipe_id)

        assert (await store.get_details(recipe_id, owner)).owner == "Grandma Sarah"
        assert await store.delete(owner, recipe_id) is True
