"""Unit tests for LastSearchCache."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import orjson
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from recipe_companion.cache import LastSearchCache
from recipe_companion.schemas import RecipePreviewWithLikes


pytestmark = pytest.mark.unit


@pytest.fixture
def mock_redis() -> MagicMock:
    """Create mock Redis client."""
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.setex = AsyncMock(return_value=True)
    return client


@pytest.fixture
def cache(mock_redis: MagicMock) -> LastSearchCache:
    """Create cache around the mock client."""
    return LastSearchCache(mock_redis, ttl=60)


@pytest.fixture
def results() -> list[RecipePreviewWithLikes]:
    """Enriched search results."""
    return [
        RecipePreviewWithLikes(id=1, title="Tomato soup", popularity=6),
        RecipePreviewWithLikes(id=2, title="Pea soup", user_has_liked=True),
    ]


class TestStore:
    """Tests for LastSearchCache.store."""

    async def test_writes_with_ttl(
        self,
        cache: LastSearchCache,
        mock_redis: MagicMock,
        results: list[RecipePreviewWithLikes],
    ) -> None:
        """Should write the serialized results under the session key."""
        assert await cache.store(7, results) is True

        key, ttl, payload = mock_redis.setex.call_args.args
        assert key == "last_search:7"
        assert ttl == 60
        stored = orjson.loads(payload)
        assert stored[0]["id"] == 1
        assert stored[1]["userHasLiked"] is True

    async def test_redis_failure_is_not_fatal(
        self,
        cache: LastSearchCache,
        mock_redis: MagicMock,
        results: list[RecipePreviewWithLikes],
    ) -> None:
        """Should report False instead of raising."""
        mock_redis.setex.side_effect = RedisConnectionError("down")

        assert await cache.store(7, results) is False

    async def test_disabled_cache_skips_redis(
        self, mock_redis: MagicMock, results: list[RecipePreviewWithLikes]
    ) -> None:
        """Should not write when switched off."""
        cache = LastSearchCache(mock_redis, enabled=False)

        assert await cache.store(7, results) is False
        mock_redis.setex.assert_not_called()

    async def test_missing_client_disables_cache(
        self, results: list[RecipePreviewWithLikes]
    ) -> None:
        """Should behave as disabled without a Redis client."""
        cache = LastSearchCache(None)

        assert cache.enabled is False
        assert await cache.store(7, results) is False


class TestLoad:
    """Tests for LastSearchCache.load."""

    async def test_reads_back_results(
        self,
        cache: LastSearchCache,
        mock_redis: MagicMock,
        results: list[RecipePreviewWithLikes],
    ) -> None:
        """Should rebuild the stored result models."""
        mock_redis.get.return_value = orjson.dumps(
            [result.model_dump() for result in results]
        ).decode()

        loaded = await cache.load(7)

        assert loaded == results
        mock_redis.get.assert_awaited_once_with("last_search:7")

    async def test_miss_is_empty(self, cache: LastSearchCache) -> None:
        """Should return [] when nothing is cached."""
        assert await cache.load(7) == []

    async def test_corrupt_entry_is_empty(
        self, cache: LastSearchCache, mock_redis: MagicMock
    ) -> None:
        """Should return [] for an unreadable entry."""
        mock_redis.get.return_value = "not json"

        assert await cache.load(7) == []

    async def test_redis_failure_is_empty(
        self, cache: LastSearchCache, mock_redis: MagicMock
    ) -> None:
        """Should return [] when Redis is unreachable."""
        mock_redis.get.side_effect = RedisConnectionError("down")

        assert await cache.load(7) == []
