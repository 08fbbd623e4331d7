"""FastAPI exception handlers for converting CalendarError to HTTP responses.

The ErrorCode-to-HTTP status mapping follows REST conventions:
- 400 Bad Request: Malformed month or date parameters
- 404 Not Found: Unknown property
- 502 Bad Gateway: The availability backend failed

Usage:
    from booking_calendar.api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

from booking_calendar.models import CalendarError, ErrorCode
from booking_calendar.utils.logging import get_logger

logger = get_logger(__name__)

# Map ErrorCode to HTTP status codes
ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_MONTH: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_DATE: HTTP_400_BAD_REQUEST,
    ErrorCode.PROPERTY_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.AVAILABILITY_UNAVAILABLE: HTTP_502_BAD_GATEWAY,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode.

    Args:
        code: The ErrorCode to map

    Returns:
        HTTP status code, defaults to 400 if not explicitly mapped.
    """
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def calendar_error_handler(request: Request, exc: CalendarError) -> JSONResponse:
    """Handle CalendarError exceptions and convert to JSON response.

    Args:
        request: The incoming request (unused but required by FastAPI)
        exc: The CalendarError exception

    Returns:
        JSONResponse with error details and appropriate status code.
    """
    status_code = get_http_status_for_error(exc.code)
    if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "Calendar request failed",
            extra={"error_code": exc.code.value, "path": request.url.path},
        )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(CalendarError, calendar_error_handler)  # type: ignore[arg-type]
