"""Unit tests for shared store plumbing."""

from __future__ import annotations

from unittest.mock import MagicMock

import asyncpg
import pytest

from recipe_companion.core.exceptions import (
    ErrorKind,
    NotFoundError,
    StorageError,
    UnauthorizedError,
)
from recipe_companion.database.stores.base import (
    BaseStore,
    affected_rows,
    decode_ingredients,
    encode_ingredients,
    require_user,
)
from recipe_companion.schemas import IngredientEntry


pytestmark = pytest.mark.unit


class TestRequireUser:
    """Tests for require_user."""

    def test_returns_present_identity(self) -> None:
        """Should pass a present user id through."""
        assert require_user(7, "list_favorites") == 7

    def test_missing_identity_is_unauthorized(self) -> None:
        """Should raise UnauthorizedError naming the operation."""
        with pytest.raises(UnauthorizedError) as exc_info:
            require_user(None, "list_favorites")

        assert exc_info.value.kind is ErrorKind.UNAUTHORIZED
        assert exc_info.value.context["operation"] == "list_favorites"


class TestAffectedRows:
    """Tests for affected_rows."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            ("DELETE 3", 3),
            ("DELETE 0", 0),
            ("INSERT 0 1", 1),
            ("UPDATE 12", 12),
            ("", 0),
        ],
    )
    def test_parses_command_status(self, status: str, expected: int) -> None:
        """Should read the trailing row count."""
        assert affected_rows(status) == expected


class TestIngredientColumns:
    """Tests for ingredient encoding and decoding."""

    def test_encode_preserves_order(self) -> None:
        """Should serialize entries in list order."""
        encoded = encode_ingredients(
            [
                IngredientEntry(name="flour", amount="2 cups"),
                IngredientEntry(name="eggs", amount="3"),
            ]
        )

        assert encoded == (
            '[{"name":"flour","amount":"2 cups"},{"name":"eggs","amount":"3"}]'
        )

    def test_encode_none_as_empty_list(self) -> None:
        """Should store a missing list as an empty JSON array."""
        assert encode_ingredients(None) == "[]"

    def test_decode_stored_list(self) -> None:
        """Should parse stored entries, coercing numeric amounts to text."""
        entries = decode_ingredients('[{"name":"Apples","amount":6}]')

        assert entries == [IngredientEntry(name="Apples", amount="6")]

    @pytest.mark.parametrize("raw", [None, "", b""])
    def test_decode_empty_column(self, raw: str | bytes | None) -> None:
        """Should treat an empty column as no ingredients."""
        assert decode_ingredients(raw) == []

    @pytest.mark.parametrize("raw", ["not json", '{"name": "flour"}', '[{"amount": 1}]'])
    def test_decode_corrupt_column_raises_value_error(self, raw: str) -> None:
        """Should raise ValueError for malformed JSON or shape."""
        with pytest.raises(ValueError):
            decode_ingredients(raw)


class TestStorageErrors:
    """Tests for BaseStore.storage_errors."""

    def test_wraps_driver_errors(self) -> None:
        """Should re-raise driver failures as StorageError with context."""
        store = BaseStore(pool=MagicMock())

        with (
            pytest.raises(StorageError) as exc_info,
            store.storage_errors("list_favorites", user_id=1),
        ):
            raise asyncpg.PostgresError("connection reset")

        assert exc_info.value.kind is ErrorKind.STORAGE_FAILURE
        assert exc_info.value.context == {"operation": "list_favorites", "user_id": 1}
        assert exc_info.value.message == "Failed to list favorites"
        assert isinstance(exc_info.value.__cause__, asyncpg.PostgresError)

    def test_wraps_connection_errors(self) -> None:
        """Should wrap OS-level connection failures too."""
        store = BaseStore(pool=MagicMock())

        with pytest.raises(StorageError), store.storage_errors("count_likes"):
            raise ConnectionRefusedError

    @pytest.mark.parametrize(
        "error",
        [
            asyncpg.exceptions.ProtocolError("bad frame"),
            asyncpg.exceptions.OutdatedSchemaCacheError("cached plan is stale"),
        ],
    )
    def test_wraps_client_side_driver_errors(self, error: Exception) -> None:
        """Should wrap asyncpg errors raised outside the server."""
        store = BaseStore(pool=MagicMock())

        with (
            pytest.raises(StorageError) as exc_info,
            store.storage_errors("count_likes"),
        ):
            raise error

        assert exc_info.value.__cause__ is error

    def test_passes_taxonomy_errors_through(self) -> None:
        """Should not rewrap errors that are already classified."""
        store = BaseStore(pool=MagicMock())

        with pytest.raises(NotFoundError), store.storage_errors("get_private_recipe"):
            raise NotFoundError("Private recipe", 1)


class TestPoolResolution:
    """Tests for BaseStore.pool."""

    def test_uses_injected_pool(self) -> None:
        """Should prefer the pool given to the constructor."""
        pool = MagicMock()
        assert BaseStore(pool=pool).pool is pool

    def test_global_pool_must_be_initialized(self) -> None:
        """Should raise RuntimeError when no pool exists."""
        with pytest.raises(RuntimeError, match="not initialized"):
            _ = BaseStore().pool
