"""Availability endpoints for the booking calendar.

Provides REST endpoints for:
- Booked and checkout-only dates of a property
- Render-ready month views with classified days and the current selection

All dates are in YYYY-MM-DD format, months in YYYY-MM format.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query

from booking_calendar.api.dependencies import get_availability_source, get_calendar_settings
from booking_calendar.config import CalendarSettings
from booking_calendar.engine import AvailabilityCalendar, AvailabilitySource
from booking_calendar.models import (
    AvailabilityResponse,
    CalendarError,
    CalendarView,
    ErrorCode,
    MonthCursor,
)
from booking_calendar.utils.dates import parse_date
from booking_calendar.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["availability"])


def _parse_date_param(name: str, value: str | None) -> dt.date | None:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        raise CalendarError(
            ErrorCode.INVALID_DATE, details={"parameter": name, "value": value}
        ) from e


@router.get(
    "/properties/{property_id}/availability",
    summary="Get property availability",
    description="""
Get the booked and checkout-only dates of a property.

**Notes:**
- Booked dates are nights held by pending/confirmed reservations or host blocks
- A checkout-only date follows a booked night: a stay ends that morning
- Dates are in YYYY-MM-DD format, ascending
""",
    response_description="Booked and checkout-only dates",
    response_model=AvailabilityResponse,
    responses={
        404: {"description": "Property not found"},
        502: {"description": "Availability backend unavailable"},
    },
)
async def get_availability(
    property_id: str,
    source: AvailabilitySource = Depends(get_availability_source),
) -> AvailabilityResponse:
    """Load availability for a property."""
    snapshot = await source.fetch(property_id)
    return AvailabilityResponse.from_snapshot(property_id, snapshot)


@router.get(
    "/properties/{property_id}/calendar/{month}",
    summary="Get monthly calendar view",
    description="""
Render one month of the availability calendar for a property.

Returns the 42-day grid (Sunday first) with every day classified, plus the
selection described by the query parameters.

**Notes:**
- Month format: YYYY-MM (e.g., 2024-06)
- `hover_date` previews the tentative range while only `start_date` is set
- A failed availability load is reported in the view (`load_state: error`)
""",
    response_description="Render-ready calendar view",
    response_model=CalendarView,
    responses={
        400: {"description": "Invalid month or date format"},
    },
)
async def get_calendar_view(
    property_id: str,
    month: str,
    start_date: str | None = Query(
        None, description="Selected check-in (YYYY-MM-DD)", examples=["2024-06-10"]
    ),
    end_date: str | None = Query(
        None, description="Selected check-out (YYYY-MM-DD)", examples=["2024-06-14"]
    ),
    hover_date: str | None = Query(
        None, description="Day under the pointer (YYYY-MM-DD)", examples=["2024-06-12"]
    ),
    min_date: str | None = Query(None, description="Minimum selectable date (YYYY-MM-DD)"),
    max_date: str | None = Query(None, description="Maximum selectable date (YYYY-MM-DD)"),
    source: AvailabilitySource = Depends(get_availability_source),
    settings: CalendarSettings = Depends(get_calendar_settings),
) -> CalendarView:
    """Render a month view for a property."""
    try:
        cursor = MonthCursor.parse(month)
    except ValueError as e:
        raise CalendarError(ErrorCode.INVALID_MONTH, details={"month": month}) from e

    start = _parse_date_param("start_date", start_date)
    end = _parse_date_param("end_date", end_date)
    hovered = _parse_date_param("hover_date", hover_date)

    calendar = AvailabilityCalendar(
        source,
        property_id,
        initial_start=start.isoformat() if start else None,
        initial_end=end.isoformat() if end else None,
        min_date=_parse_date_param("min_date", min_date),
        max_date=_parse_date_param("max_date", max_date),
        settings=settings,
    )
    async with calendar:
        await calendar.wait_until_loaded()
        calendar.go_to_month(cursor.first_day)
        if hovered:
            calendar.hover(hovered)
        return calendar.render()
