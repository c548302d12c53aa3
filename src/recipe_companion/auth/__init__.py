"""Caller identity resolution."""

from recipe_companion.auth.dependencies import OptionalUserId, get_optional_user_id


__all__ = [
    "OptionalUserId",
    "get_optional_user_id",
]
