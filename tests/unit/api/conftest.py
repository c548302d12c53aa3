"""API unit test fixtures.

The app is built without running its lifespan; mocked services are
published on ``app.state`` exactly where startup would put them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from recipe_companion.factory import create_app


if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI


pytestmark = pytest.mark.unit


@pytest.fixture
def mock_aggregator() -> MagicMock:
    """Create mock recipe aggregator."""
    aggregator = MagicMock()
    aggregator.get_details = AsyncMock()
    aggregator.get_preview_batch = AsyncMock(return_value=[])
    aggregator.get_random = AsyncMock(return_value=[])
    aggregator.search = AsyncMock(return_value=[])
    return aggregator


@pytest.fixture
def mock_like_engine() -> MagicMock:
    """Create mock like engine."""
    engine = MagicMock()
    engine.toggle = AsyncMock()
    engine.count_combined = AsyncMock(return_value=0)
    engine.summary = AsyncMock()
    return engine


@pytest.fixture
def mock_favorites() -> MagicMock:
    """Create mock favorites store."""
    store = MagicMock()
    store.add = AsyncMock(return_value=None)
    store.remove = AsyncMock(return_value=True)
    store.list = AsyncMock(return_value=[])
    return store


@pytest.fixture
def mock_watch_history() -> MagicMock:
    """Create mock watch history store."""
    store = MagicMock()
    store.record_view = AsyncMock()
    store.list_all = AsyncMock(return_value=[])
    store.list_recent = AsyncMock(return_value=[])
    store.clear_all = AsyncMock(return_value=0)
    return store


@pytest.fixture
def mock_private_recipes() -> MagicMock:
    """Create mock private recipe store."""
    store = MagicMock()
    store.create = AsyncMock(return_value=1)
    store.list = AsyncMock(return_value=[])
    store.get_details = AsyncMock()
    store.delete = AsyncMock(return_value=True)
    return store


@pytest.fixture
def mock_family_recipes() -> MagicMock:
    """Create mock family recipe store."""
    store = MagicMock()
    store.create = AsyncMock(return_value=1)
    store.list_all = AsyncMock(return_value=[])
    store.get_details = AsyncMock()
    store.delete = AsyncMock(return_value=True)
    return store


@pytest.fixture
def mock_last_search() -> MagicMock:
    """Create mock last-search cache."""
    cache = MagicMock()
    cache.store = AsyncMock(return_value=True)
    cache.load = AsyncMock(return_value=[])
    return cache


@pytest.fixture
def app(
    mock_aggregator: MagicMock,
    mock_like_engine: MagicMock,
    mock_favorites: MagicMock,
    mock_watch_history: MagicMock,
    mock_private_recipes: MagicMock,
    mock_family_recipes: MagicMock,
    mock_last_search: MagicMock,
) -> FastAPI:
    """Application with mocked services on app.state."""
    application = create_app()
    application.state.aggregator = mock_aggregator
    application.state.like_engine = mock_like_engine
    application.state.favorites_store = mock_favorites
    application.state.watch_history_store = mock_watch_history
    application.state.private_recipe_store = mock_private_recipes
    application.state.family_recipe_store = mock_family_recipes
    application.state.last_search_cache = mock_last_search
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test/api/v1",
    ) as http:
        yield http
