"""Like state schemas."""

from __future__ import annotations

from pydantic import Field

from recipe_companion.schemas.base import APIRequest, APIResponse


class LikeRequest(APIRequest):
    """Body of a like toggle; omit ``like`` to flip the current state."""

    like: bool | None = Field(default=None, strict=True)


class LikeToggleResult(APIResponse):
    """Stored like state after a toggle."""

    liked: bool


class LikeSummary(APIResponse):
    """Combined popularity and the caller's like state for one recipe."""

    total_likes: int
    user_has_liked: bool


class LikeResponse(LikeSummary):
    """Response of the like endpoint."""

    liked: bool
