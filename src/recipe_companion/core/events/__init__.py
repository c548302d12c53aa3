"""Application lifecycle events."""

from recipe_companion.core.events.lifespan import lifespan


__all__ = ["lifespan"]
