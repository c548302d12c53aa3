"""Application entry point.

Usage:
    # Development with auto-reload
    uvicorn recipe_companion.main:app --reload

    # Or directly
    python -m recipe_companion.main
"""

from recipe_companion.factory import create_app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    from recipe_companion.core.config import get_settings

    settings = get_settings()

    uvicorn.run(
        "recipe_companion.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )
