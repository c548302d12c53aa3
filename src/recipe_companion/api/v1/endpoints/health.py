"""Health check endpoints.

Provides liveness and readiness probes for orchestrators and load balancers.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field

from recipe_companion.cache.redis import check_redis_health
from recipe_companion.core.config import Settings, get_settings
from recipe_companion.database.connection import check_database_health


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Health status", examples=["healthy"])
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Current server timestamp",
    )
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")


class ReadinessResponse(HealthResponse):
    """Readiness check response with dependency status."""

    dependencies: dict[str, str] = Field(
        default_factory=dict,
        description="Status of external dependencies",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Check if the service is alive; external dependencies are not checked."""
    return HealthResponse(
        status="healthy",
        version=settings.app.version,
        environment=settings.APP_ENV,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={503: {"description": "Database unavailable"}},
)
async def readiness_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ORJSONResponse:
    """Check if the service can handle requests.

    The database is required; Redis only backs the optional last-search
    cache, so its status is reported but never makes the service unready.
    """
    dependencies = {
        **(await check_database_health()),
        **(await check_redis_health()),
    }
    ready = dependencies.get("database") == "healthy"

    body = ReadinessResponse(
        status="ready" if ready else "not_ready",
        version=settings.app.version,
        environment=settings.APP_ENV,
        dependencies=dependencies,
    )
    return ORJSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(mode="json"),
    )
