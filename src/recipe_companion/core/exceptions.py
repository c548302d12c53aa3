"""Error taxonomy and exception handlers.

Every failure that leaves the core is one of a closed set of kinds
(``ErrorKind``). Callers switch on ``exc.kind`` instead of inspecting
ad hoc fields; the HTTP layer maps each kind to a fixed status code.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipe_companion.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import Request

logger = get_logger(__name__)


class ErrorKind(StrEnum):
    """Closed set of failure kinds."""

    VALIDATION_FAILURE = "VALIDATION_FAILURE"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INSUFFICIENT_CONTENT = "INSUFFICIENT_CONTENT"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    STORAGE_FAILURE = "STORAGE_FAILURE"


_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_FAILURE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INSUFFICIENT_CONTENT: status.HTTP_204_NO_CONTENT,
    ErrorKind.UPSTREAM_FAILURE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ErrorDetail(BaseModel):
    """Structured error detail for validation errors."""

    code: str
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    """Structured error response."""

    error: str
    message: str
    details: list[ErrorDetail] | None = None
    request_id: str | None = None


class AppError(Exception):
    """Base application error.

    Attributes:
        kind: Failure kind from the closed taxonomy.
        message: Human readable message, safe to show to end users.
        context: Operation name and ids involved, for logging.
    """

    kind: ErrorKind = ErrorKind.STORAGE_FAILURE

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        details: list[ErrorDetail] | None = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        self.details = details
        super().__init__(message)

    @property
    def status_code(self) -> int:
        """HTTP status code for this error kind."""
        return _STATUS_BY_KIND[self.kind]


class ValidationFailedError(AppError):
    """Missing or malformed required field (caller error)."""

    kind = ErrorKind.VALIDATION_FAILURE

    def __init__(
        self,
        message: str,
        *,
        missing_fields: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.missing_fields = missing_fields or []
        details = [
            ErrorDetail(code="MISSING_FIELD", message=f"{name} is required", field=name)
            for name in self.missing_fields
        ]
        super().__init__(message, context=context, details=details or None)


class MissingQueryError(ValidationFailedError):
    """Search was requested without a query term."""

    def __init__(self) -> None:
        super().__init__(
            "Query parameter is missing",
            missing_fields=["query"],
            context={"operation": "search"},
        )


class UnauthorizedError(AppError):
    """Owner-scoped operation requested without an identity."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, operation: str, message: str = "User not logged in") -> None:
        super().__init__(message, context={"operation": operation})


class NotFoundError(AppError):
    """Resource absent, or owned by someone else (the two are indistinguishable)."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str, identifier: Any, **context: Any) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            f"{resource} not found",
            context={"resource": resource, "id": identifier, **context},
        )


class ConflictError(AppError):
    """Duplicate of a unique relation."""

    kind = ErrorKind.CONFLICT


class InsufficientContentError(AppError):
    """Collection exists but is below its minimum display size."""

    kind = ErrorKind.INSUFFICIENT_CONTENT

    def __init__(self, message: str, *, available: int, required: int) -> None:
        self.available = available
        self.required = required
        super().__init__(
            message, context={"available": available, "required": required}
        )


class UpstreamError(AppError):
    """The external catalog failed or was unreachable."""

    kind = ErrorKind.UPSTREAM_FAILURE


class StorageError(AppError):
    """The persistence collaborator failed."""

    kind = ErrorKind.STORAGE_FAILURE


def _get_request_id(request: Request) -> str | None:
    """Extract request ID from request state."""
    return getattr(request.state, "request_id", None)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> Response:
        """Render taxonomy errors with their mapped status code."""
        if exc.kind is ErrorKind.INSUFFICIENT_CONTENT:
            return Response(status_code=exc.status_code)

        if exc.kind in (ErrorKind.STORAGE_FAILURE, ErrorKind.UPSTREAM_FAILURE):
            logger.error(
                "Request failed",
                kind=exc.kind.value,
                error_message=exc.message,
                **exc.context,
            )

        return ORJSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=exc.kind.value,
                message=exc.message,
                details=exc.details,
                request_id=_get_request_id(request),
            ).model_dump(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> ORJSONResponse:
        """Handle Starlette HTTP exceptions."""
        return ORJSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error="HTTP_ERROR",
                message=str(exc.detail),
                request_id=_get_request_id(request),
            ).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> ORJSONResponse:
        """Handle Pydantic validation errors."""
        details = [
            ErrorDetail(
                code="VALIDATION_ERROR",
                message=error["msg"],
                field=".".join(str(loc) for loc in error["loc"]),
            )
            for error in exc.errors()
        ]
        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ErrorResponse(
                error="VALIDATION_ERROR",
                message="Request validation failed",
                details=details,
                request_id=_get_request_id(request),
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> ORJSONResponse:
        """Handle unexpected exceptions."""
        logger.opt(exception=exc).error("Unhandled exception")

        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred",
                request_id=_get_request_id(request),
            ).model_dump(),
        )
