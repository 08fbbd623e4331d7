"""Standard error codes for the booking calendar.

Only availability load failures ever reach the user. Invalid clicks,
month rollover and malformed host input are handled as no-ops and never
raise; these codes cover the data sources and the HTTP layer.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Calendar error codes."""

    AVAILABILITY_UNAVAILABLE = "ERR_CAL_001"
    PROPERTY_NOT_FOUND = "ERR_CAL_002"
    INVALID_MONTH = "ERR_CAL_003"
    INVALID_DATE = "ERR_CAL_004"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.AVAILABILITY_UNAVAILABLE: "Failed to load availability data",
    ErrorCode.PROPERTY_NOT_FOUND: "Property not found",
    ErrorCode.INVALID_MONTH: "Invalid month. Expected YYYY-MM format",
    ErrorCode.INVALID_DATE: "Invalid date. Expected YYYY-MM-DD format",
}

# Recovery suggestions for hosts
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.AVAILABILITY_UNAVAILABLE: "Offer a 'Try again' action that reloads availability",
    ErrorCode.PROPERTY_NOT_FOUND: "Verify the property identifier",
    ErrorCode.INVALID_MONTH: "Send the month as YYYY-MM (e.g., 2024-06)",
    ErrorCode.INVALID_DATE: "Send dates as YYYY-MM-DD (e.g., 2024-06-10)",
}


class ErrorResponse(BaseModel):
    """Standard error response body."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class CalendarError(Exception):
    """Exception raised by calendar data sources and the HTTP layer."""

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
        message: Optional[str] = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse(
            error_code=self.code,
            message=self.message,
            recovery=self.recovery,
            details=self.details,
        )


class AvailabilityLoadError(CalendarError):
    """An availability source could not produce data for a property."""

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
    ):
        super().__init__(ErrorCode.AVAILABILITY_UNAVAILABLE, details=details, message=message)
