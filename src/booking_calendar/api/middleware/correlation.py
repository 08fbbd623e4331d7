"""Request context middleware for tracing.

Extracts the X-Correlation-ID header from incoming requests or generates a new
one, and scopes property routes (/api/properties/{property_id}/...) to their
property. Both values live in contextvars for the whole request lifecycle,
including the availability loads started while serving it, so every log line
of a calendar request carries them.
"""

import re

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from booking_calendar.utils.logging import (
    clear_correlation_id,
    clear_property_id,
    set_correlation_id,
    set_property_id,
)

CORRELATION_ID_HEADER = "X-Correlation-ID"

PROPERTY_PATH = re.compile(r"/properties/(?P<property_id>[^/]+)")


def property_id_from_path(path: str) -> str | None:
    """Property id of a property-scoped route, if the path is one."""
    match = PROPERTY_PATH.search(path)
    return match["property_id"] if match else None


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware that manages correlation IDs and property context."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request with correlation ID and property context.

        Args:
            request: Incoming request
            call_next: Next middleware/handler in chain

        Returns:
            Response with correlation ID header
        """
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        set_property_id(property_id_from_path(request.url.path))

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            clear_property_id()
            clear_correlation_id()
