"""Short-lived cache of each caller's most recent search results.

Entries are keyed by session identifier (the caller's user id) and expire
after a fixed TTL. The cache is best-effort: Redis being absent or failing
never fails a request, it only means there is no last search to show.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson
from pydantic import TypeAdapter

from recipe_companion.observability.logging import get_logger
from recipe_companion.schemas.recipe import RecipePreviewWithLikes


if TYPE_CHECKING:
    from collections.abc import Sequence

    from redis.asyncio import Redis

logger = get_logger(__name__)

_RESULTS = TypeAdapter(list[RecipePreviewWithLikes])


class LastSearchCache:
    """Per-session store of the last search result set."""

    def __init__(
        self,
        client: Redis[Any] | None,
        *,
        ttl: int = 1800,
        prefix: str = "last_search",
        enabled: bool = True,
    ) -> None:
        """Initialize the cache.

        Args:
            client: Redis client, or None to disable caching.
            ttl: Seconds an entry survives after the search that wrote it.
            prefix: Key prefix.
            enabled: Feature switch from configuration.
        """
        self._client = client
        self.ttl = ttl
        self.prefix = prefix
        self.enabled = enabled and client is not None

    def _make_key(self, session_id: int | str) -> str:
        return f"{self.prefix}:{session_id}"

    async def store(
        self,
        session_id: int | str,
        results: Sequence[RecipePreviewWithLikes],
    ) -> bool:
        """Replace the session's last search. Returns False if not stored."""
        if not self.enabled or self._client is None:
            return False

        payload = orjson.dumps([result.model_dump() for result in results])
        try:
            await self._client.setex(self._make_key(session_id), self.ttl, payload)
        except Exception:
            logger.exception("Last search store failed", session_id=session_id)
            return False
        else:
            return True

    async def load(self, session_id: int | str) -> list[RecipePreviewWithLikes]:
        """The session's last search, or an empty list."""
        if not self.enabled or self._client is None:
            return []

        try:
            raw = await self._client.get(self._make_key(session_id))
            if raw is None:
                return []
            return _RESULTS.validate_python(orjson.loads(raw))
        except Exception:
            logger.exception("Last search load failed", session_id=session_id)
            return []
