"""Schemas for per-user relations (favorites, watch history)."""

from __future__ import annotations

from recipe_companion.schemas.base import APIRequest, APIResponse


class FavoriteRequest(APIRequest):
    """Body of an add-favorite call."""

    recipe_id: int


class MessageResponse(APIResponse):
    """Plain acknowledgement."""

    message: str
    success: bool = True


class RemovedResponse(MessageResponse):
    """Acknowledgement of a single-row removal."""

    removed: bool


class ClearedResponse(MessageResponse):
    """Acknowledgement of a bulk removal."""

    deleted_count: int
