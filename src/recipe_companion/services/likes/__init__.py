"""Like reconciliation package.

Combines the local like relation with catalog-reported popularity.
"""

from recipe_companion.services.likes.service import LikeEngine


__all__ = ["LikeEngine"]
