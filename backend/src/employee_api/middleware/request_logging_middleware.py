"""Request logging middleware with request IDs and CORS origin monitoring."""

import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from employee_api.utils.request_id import REQUEST_ID_HEADER, resolve_request_id

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request and tag it with an X-Request-ID.

    Requests carrying an Origin header that is not in the allowed list
    are logged at WARNING so misconfigured clients show up in the logs.

    Should be added AFTER CORSMiddleware so it runs BEFORE it on requests.
    """

    def __init__(self, app, allowed_origins: list[str]) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application
            allowed_origins: List of allowed origin URLs
        """
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        """Process the request, then log and tag the response.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response from downstream handler
        """
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        origin = request.headers.get("origin")
        if origin and origin not in self.allowed_origins:
            logger.warning(
                "CORS origin rejected",
                extra={
                    "origin": origin,
                    "method": request.method,
                    "path": request.url.path,
                    "request_id": request_id,
                },
            )

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "%s %s %d %.1fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id,
        )
        return response
