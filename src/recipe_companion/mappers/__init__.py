"""Data mappers for transforming between different schema representations.

This package contains functions for mapping data between:
- Catalog (Spoonacular) payloads
- API preview and details responses
"""

from recipe_companion.mappers.recipe import to_details, to_preview, with_social_state


__all__ = [
    "to_details",
    "to_preview",
    "with_social_state",
]
