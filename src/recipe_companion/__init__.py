"""Recipe companion service.

Reconciles external catalog recipe metadata with locally owned per-user
state: favorites, watch history, likes and user-authored recipes.
"""

__version__ = "0.1.0"
