"""Unit tests for LikeStore."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from recipe_companion.core.exceptions import StorageError
from recipe_companion.database.stores import LikeStore


pytestmark = pytest.mark.unit


@pytest.fixture
def store(mock_pool: MagicMock) -> LikeStore:
    """Create store with mock pool."""
    return LikeStore(pool=mock_pool)


class TestSetLiked:
    """Tests for LikeStore.set_liked."""

    async def test_like_is_conflict_tolerant_insert(
        self, store: LikeStore, mock_conn: AsyncMock
    ) -> None:
        """Should insert and ignore an existing row."""
        assert await store.set_liked(1, 42, liked=True) is True

        query = mock_conn.execute.call_args.args[0]
        assert query.startswith("INSERT INTO recipe_likes")
        assert "ON CONFLICT (user_id, recipe_id) DO NOTHING" in query

    async def test_unlike_is_delete(self, store: LikeStore, mock_conn: AsyncMock) -> None:
        """Should delete, tolerating a missing row."""
        mock_conn.execute.return_value = "DELETE 0"

        assert await store.set_liked(1, 42, liked=False) is False
        assert mock_conn.execute.call_args.args[0].startswith("DELETE FROM recipe_likes")


class TestToggle:
    """Tests for LikeStore.toggle."""

    async def test_insert_means_liked(self, store: LikeStore, mock_conn: AsyncMock) -> None:
        """Should report liked when the statement inserted a row."""
        mock_conn.fetchval.return_value = 1

        assert await store.toggle(1, 42) is True

    async def test_no_insert_means_unliked(
        self, store: LikeStore, mock_conn: AsyncMock
    ) -> None:
        """Should report unliked when the existing row was deleted instead."""
        mock_conn.fetchval.return_value = None

        assert await store.toggle(1, 42) is False

    async def test_flip_is_a_single_statement(
        self, store: LikeStore, mock_conn: AsyncMock
    ) -> None:
        """Should delete-or-insert in one round trip."""
        await store.toggle(1, 42)

        mock_conn.fetchval.assert_awaited_once()
        query = mock_conn.fetchval.call_args.args[0]
        assert "WITH removed AS" in query
        assert "WHERE NOT EXISTS (SELECT 1 FROM removed)" in query


class TestReads:
    """Tests for exists and count."""

    async def test_exists(self, store: LikeStore, mock_conn: AsyncMock) -> None:
        """Should coerce the EXISTS result to bool."""
        mock_conn.fetchval.return_value = True

        assert await store.exists(1, 42) is True

    async def test_count(self, store: LikeStore, mock_conn: AsyncMock) -> None:
        """Should return the number of like rows."""
        mock_conn.fetchval.return_value = 5

        assert await store.count(42) == 5

    @pytest.mark.parametrize(
        "error",
        [
            asyncpg.InterfaceError("pool closed"),
            asyncpg.exceptions.ProtocolError("bad frame"),
        ],
    )
    async def test_count_failure_is_storage_error(
        self, store: LikeStore, mock_conn: AsyncMock, error: Exception
    ) -> None:
        """Should wrap driver and protocol failures."""
        mock_conn.fetchval.side_effect = error

        with pytest.raises(StorageError):
            await store.count(42)
