"""Application factory for creating FastAPI instances.

This module provides the create_app factory function that:
- Configures the FastAPI application with appropriate settings
- Sets up the middleware stack in the correct order
- Registers exception handlers
- Mounts API routers
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from recipe_companion.api.v1.router import router as v1_router
from recipe_companion.core.config import Settings, get_settings
from recipe_companion.core.events import lifespan
from recipe_companion.core.exceptions import setup_exception_handlers
from recipe_companion.core.middleware import LoggingMiddleware, RequestIDMiddleware


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance.

    Args:
        settings: Optional settings override. If not provided, uses get_settings().

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description=(
            "Recipe Companion Service - favorites, watch history, likes and "
            "personal recipes on top of an external recipe catalog"
        ),
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        debug=settings.app.debug,
    )

    app.state.settings = settings

    setup_exception_handlers(app)
    _setup_middleware(app, settings)
    _setup_routers(app, settings)

    return app


def _setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure middleware stack.

    Middleware is executed in reverse order of addition. Order from the
    request's perspective:
    1. RequestIDMiddleware (adds request ID and resets log context)
    2. LoggingMiddleware (logs requests/responses)
    3. CORSMiddleware (handles CORS)
    """
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)


def _setup_routers(app: FastAPI, settings: Settings) -> None:
    """Mount API routers.

    Args:
        app: FastAPI application instance.
        settings: Application settings.
    """
    app.include_router(v1_router, prefix=settings.api.v1_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint returning basic service info."""
        return {
            "service": settings.app.name,
            "version": settings.app.version,
            "docs": "/docs" if settings.is_development else "disabled",
        }
