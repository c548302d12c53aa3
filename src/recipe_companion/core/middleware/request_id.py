"""Request ID middleware.

Propagates an incoming ``X-Request-ID`` (or generates one), exposes it on
``request.state`` for error responses, echoes it on the response, and binds
it to the logging context so every record of the request carries it.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Final

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recipe_companion.observability.logging import bind_context, clear_context


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

# Longer incoming ids are replaced rather than trusted
MAX_REQUEST_ID_LENGTH: Final[int] = 128


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request id to every request and response."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add request ID."""
        clear_context()

        incoming = request.headers.get(self.header_name, "").strip()
        if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
            request_id = incoming
        else:
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id
        bind_context(request_id=request_id)

        response = await call_next(request)
        response.headers[self.header_name] = request_id
        return response
