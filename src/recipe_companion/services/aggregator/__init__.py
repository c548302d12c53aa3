"""Recipe aggregator package.

Merges catalog metadata with local like state into response shapes.
"""

from recipe_companion.services.aggregator.service import RecipeAggregator


__all__ = ["RecipeAggregator"]
