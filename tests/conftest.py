"""Shared test fixtures and configuration for the Recipe Companion service tests."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from recipe_companion.core.config import get_settings


if TYPE_CHECKING:
    from collections.abc import Generator


os.environ.setdefault("APP_ENV", "test")


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Reload settings for every test so env patches take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
