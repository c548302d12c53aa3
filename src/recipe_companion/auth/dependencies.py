"""Caller identity dependencies.

Authentication happens upstream (gateway or session layer), which forwards
the resolved user id in a header. This module only reads that header.

WARNING: The header value is trusted completely. Deploy only behind a
trusted upstream that sets it.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from recipe_companion.core.config import get_settings
from recipe_companion.core.exceptions import UnauthorizedError
from recipe_companion.observability.logging import bind_context, get_logger


logger = get_logger(__name__)


async def get_optional_user_id(request: Request) -> int | None:
    """Resolve the caller's user id, or None for anonymous callers.

    Raises:
        UnauthorizedError: If the header is present but not a positive integer.
    """
    header = get_settings().auth.user_id_header
    raw = request.headers.get(header)
    if raw is None or not raw.strip():
        return None

    try:
        user_id = int(raw.strip())
    except ValueError:
        user_id = 0

    if user_id <= 0:
        logger.debug("Rejected malformed identity header", header=header)
        raise UnauthorizedError("identify_user", "Invalid user identifier")

    bind_context(user_id=user_id)
    return user_id


OptionalUserId = Annotated[int | None, Depends(get_optional_user_id)]
