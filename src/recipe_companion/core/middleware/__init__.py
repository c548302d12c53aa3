"""Custom middleware components."""

from recipe_companion.core.middleware.logging import LoggingMiddleware
from recipe_companion.core.middleware.request_id import RequestIDMiddleware


__all__ = [
    "LoggingMiddleware",
    "RequestIDMiddleware",
]
