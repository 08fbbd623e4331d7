"""Calendar models: month cursor, grid slots, classified days and ranges.

These models are value objects. A CalendarDay is a projection recomputed on
every render pass and never mutated in place.
"""

import calendar
import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from booking_calendar.utils.dates import nights_between, parse_optional_date, to_date_string

from .enums import DayStatus, LoadState, SelectionState

# Padding days need one spare year on each side of the cursor
MIN_CURSOR_YEAR = dt.MINYEAR + 1
MAX_CURSOR_YEAR = dt.MAXYEAR - 1

WEEKDAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class MonthCursor(BaseModel):
    """The (year, month) pair identifying the displayed month."""

    model_config = ConfigDict(strict=True, frozen=True)

    year: int = Field(ge=MIN_CURSOR_YEAR, le=MAX_CURSOR_YEAR)
    month: int = Field(ge=1, le=12)

    @classmethod
    def normalized(cls, year: int, month: int) -> "MonthCursor":
        """Build a cursor, carrying out-of-range months into the year.

        Args:
            year: Calendar year
            month: Month number, any integer (13 -> January of next year,
                0 -> December of previous year)

        Returns:
            A valid MonthCursor (years clamped to the supported range)
        """
        carried_year, month_index = divmod(year * 12 + (month - 1), 12)
        if carried_year < MIN_CURSOR_YEAR:
            return cls(year=MIN_CURSOR_YEAR, month=1)
        if carried_year > MAX_CURSOR_YEAR:
            return cls(year=MAX_CURSOR_YEAR, month=12)
        return cls(year=carried_year, month=month_index + 1)

    @classmethod
    def from_date(cls, value: dt.date) -> "MonthCursor":
        """Cursor for the month containing a date."""
        return cls.normalized(value.year, value.month)

    @classmethod
    def parse(cls, value: str) -> "MonthCursor":
        """Parse a month in YYYY-MM format.

        Raises:
            ValueError: If the format or month number is invalid
        """
        try:
            year_part, month_part = value.split("-")
            year, month = int(year_part), int(month_part)
        except ValueError as e:
            raise ValueError(f"Invalid month '{value}'. Expected YYYY-MM format.") from e
        if len(year_part) != 4 or len(month_part) != 2 or not 1 <= month <= 12:
            raise ValueError(f"Invalid month '{value}'. Expected YYYY-MM format.")
        return cls.normalized(year, month)

    def shift(self, months: int) -> "MonthCursor":
        """Cursor moved by a number of months (negative moves back)."""
        return MonthCursor.normalized(self.year, self.month + months)

    @property
    def first_day(self) -> dt.date:
        return dt.date(self.year, self.month, 1)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def label(self) -> str:
        """Human-readable month name, e.g. 'June 2024'."""
        return f"{calendar.month_name[self.month]} {self.year}"

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


class GridSlot(BaseModel):
    """One cell of the 6x7 calendar grid before classification."""

    model_config = ConfigDict(strict=True, frozen=True)

    date: dt.date
    is_current_month: bool


class DateRange(BaseModel):
    """Selected check-in/check-out range.

    Once both dates are set, start_date <= end_date. Values supplied in
    reverse order are swapped; an end date without a start is dropped.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    start_date: dt.date | None = None
    end_date: dt.date | None = None

    @model_validator(mode="before")
    @classmethod
    def order_endpoints(cls, data: Any) -> Any:
        """Swap reversed endpoints and drop a lone end date."""
        if not isinstance(data, dict):
            return data
        start = data.get("start_date")
        end = data.get("end_date")
        if start is None and end is not None:
            return {"start_date": None, "end_date": None}
        if isinstance(start, dt.date) and isinstance(end, dt.date) and end < start:
            return {"start_date": end, "end_date": start}
        return data

    @classmethod
    def from_strings(cls, start: str | None, end: str | None) -> "DateRange":
        """Build a range from boundary strings.

        Unparsable values degrade to "not set" instead of raising.
        """
        return cls(start_date=parse_optional_date(start), end_date=parse_optional_date(end))

    @property
    def state(self) -> SelectionState:
        if self.start_date and self.end_date:
            return SelectionState.COMPLETE
        if self.start_date:
            return SelectionState.AWAITING_END
        return SelectionState.EMPTY

    @property
    def nights(self) -> int:
        return nights_between(self.start_date, self.end_date)

    def contains(self, value: dt.date) -> bool:
        """Whether a date lies inside a complete range (inclusive)."""
        if self.start_date is None or self.end_date is None:
            return False
        return self.start_date <= value <= self.end_date

    def to_strings(self) -> dict[str, str]:
        """Boundary payload: YYYY-MM-DD strings, empty string when unset."""
        return {
            "start_date": to_date_string(self.start_date),
            "end_date": to_date_string(self.end_date),
        }


class CalendarDay(BaseModel):
    """A fully classified day, ready for rendering."""

    model_config = ConfigDict(strict=True, frozen=True)

    date: dt.date
    is_current_month: bool
    is_past: bool
    is_today: bool
    is_booked: bool
    is_checkout_only: bool
    is_selectable: bool
    is_selected: bool = False
    is_range_start: bool = False
    is_range_end: bool = False
    is_hover_preview: bool = False
    status: DayStatus

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_highlighted(self) -> bool:
        """Whether selection or hover styling applies.

        Past and booked styling take priority over selection styling.
        """
        if self.status in (DayStatus.PAST, DayStatus.BOOKED):
            return False
        return (
            self.is_selected
            or self.is_range_start
            or self.is_range_end
            or self.is_hover_preview
        )


class CalendarView(BaseModel):
    """Render-ready snapshot of the calendar widget."""

    model_config = ConfigDict(strict=True, frozen=True)

    cursor: MonthCursor
    label: str
    weekday_headers: list[str] = Field(default_factory=lambda: list(WEEKDAY_HEADERS))
    days: list[CalendarDay]
    load_state: LoadState
    error: str | None = None
    selection: DateRange
    selection_state: SelectionState
    nights: int = Field(ge=0)
