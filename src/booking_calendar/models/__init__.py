"""Pydantic models for booking calendar entities."""

from .availability import AvailabilityResponse, AvailabilitySnapshot
from .calendar import (
    WEEKDAY_HEADERS,
    CalendarDay,
    CalendarView,
    DateRange,
    GridSlot,
    MonthCursor,
)
from .enums import (
    BLOCKING_RESERVATION_STATUSES,
    CheckoutOnlyPolicy,
    DayStatus,
    LoadState,
    ReservationStatus,
    SelectionState,
)
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    AvailabilityLoadError,
    CalendarError,
    ErrorCode,
    ErrorResponse,
)

__all__ = [
    # Enums
    "BLOCKING_RESERVATION_STATUSES",
    "CheckoutOnlyPolicy",
    "DayStatus",
    "LoadState",
    "ReservationStatus",
    "SelectionState",
    # Calendar
    "WEEKDAY_HEADERS",
    "CalendarDay",
    "CalendarView",
    "DateRange",
    "GridSlot",
    "MonthCursor",
    # Availability
    "AvailabilityResponse",
    "AvailabilitySnapshot",
    # Errors
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "AvailabilityLoadError",
    "CalendarError",
    "ErrorCode",
    "ErrorResponse",
]
