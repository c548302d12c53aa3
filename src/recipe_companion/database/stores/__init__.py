"""Per-user stores backed by PostgreSQL."""

from recipe_companion.database.stores.family_recipes import FamilyRecipeStore
from recipe_companion.database.stores.favorites import FavoritesStore
from recipe_companion.database.stores.likes import LikeStore
from recipe_companion.database.stores.private_recipes import PrivateRecipeStore
from recipe_companion.database.stores.watch_history import WatchHistoryStore


__all__ = [
    "FamilyRecipeStore",
    "FavoritesStore",
    "LikeStore",
    "PrivateRecipeStore",
    "WatchHistoryStore",
]
