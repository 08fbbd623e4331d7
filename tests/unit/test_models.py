"""Unit tests for calendar and availability models."""

import datetime as dt

import pytest
from pydantic import ValidationError

from booking_calendar.models import (
    AvailabilityResponse,
    AvailabilitySnapshot,
    CalendarDay,
    CalendarError,
    DateRange,
    DayStatus,
    ErrorCode,
    ErrorResponse,
    MonthCursor,
    SelectionState,
)


def make_day(**overrides: object) -> CalendarDay:
    fields: dict[str, object] = {
        "date": dt.date(2024, 6, 10),
        "is_current_month": True,
        "is_past": False,
        "is_today": False,
        "is_booked": False,
        "is_checkout_only": False,
        "is_selectable": True,
        "status": DayStatus.AVAILABLE,
    }
    fields.update(overrides)
    return CalendarDay(**fields)  # type: ignore[arg-type]


class TestDateRange:
    """Tests for DateRange ordering and state."""

    def test_empty_by_default(self) -> None:
        assert DateRange().state == SelectionState.EMPTY

    def test_awaiting_end(self) -> None:
        assert DateRange(start_date=dt.date(2024, 6, 10)).state == SelectionState.AWAITING_END

    def test_reversed_endpoints_are_swapped(self) -> None:
        """Host-supplied ranges in reverse order are normalized."""
        date_range = DateRange(start_date=dt.date(2024, 6, 20), end_date=dt.date(2024, 6, 10))

        assert date_range.start_date == dt.date(2024, 6, 10)
        assert date_range.end_date == dt.date(2024, 6, 20)
        assert date_range.state == SelectionState.COMPLETE

    def test_end_without_start_is_dropped(self) -> None:
        assert DateRange(end_date=dt.date(2024, 6, 20)) == DateRange()

    def test_from_strings_degrades_bad_values(self) -> None:
        date_range = DateRange.from_strings("garbage", "2024-06-20")

        assert date_range == DateRange()

    def test_nights_and_contains(self) -> None:
        date_range = DateRange.from_strings("2024-06-10", "2024-06-14")

        assert date_range.nights == 4
        assert date_range.contains(dt.date(2024, 6, 10))
        assert date_range.contains(dt.date(2024, 6, 14))
        assert not date_range.contains(dt.date(2024, 6, 15))

    def test_to_strings(self) -> None:
        """Unset endpoints serialize as empty strings."""
        assert DateRange.from_strings("2024-06-10", None).to_strings() == {
            "start_date": "2024-06-10",
            "end_date": "",
        }

    def test_is_frozen(self) -> None:
        date_range = DateRange()
        with pytest.raises(ValidationError):
            date_range.start_date = dt.date(2024, 6, 10)  # type: ignore[misc]


class TestCalendarDay:
    """Tests for CalendarDay styling rules."""

    def test_selected_day_is_highlighted(self) -> None:
        assert make_day(is_selected=True).is_highlighted is True

    def test_booked_styling_wins_over_selection(self) -> None:
        day = make_day(
            is_booked=True, is_selectable=False, is_hover_preview=True, status=DayStatus.BOOKED
        )

        assert day.is_highlighted is False

    def test_past_styling_wins_over_selection(self) -> None:
        day = make_day(is_past=True, is_selectable=False, is_selected=True, status=DayStatus.PAST)

        assert day.is_highlighted is False

    def test_highlight_in_serialized_output(self) -> None:
        assert make_day(is_range_start=True).model_dump()["is_highlighted"] is True


class TestAvailabilitySnapshot:
    """Tests for AvailabilitySnapshot coercion."""

    def test_accepts_strings_and_datetimes(self) -> None:
        snapshot = AvailabilitySnapshot(
            booked=["2024-06-15", dt.datetime(2024, 6, 16, 22, 0)],
            checkout_only=["2024-06-17T10:00:00Z"],
        )

        assert snapshot.booked == frozenset({dt.date(2024, 6, 15), dt.date(2024, 6, 16)})
        assert snapshot.checkout_only == frozenset({dt.date(2024, 6, 17)})

    def test_rejects_unreadable_dates(self) -> None:
        with pytest.raises(ValidationError):
            AvailabilitySnapshot(booked=["15/06/2024"])

    def test_overlap(self) -> None:
        snapshot = AvailabilitySnapshot(booked=["2024-06-15"], checkout_only=["2024-06-15"])

        assert snapshot.overlap == frozenset({dt.date(2024, 6, 15)})

    def test_response_sorts_dates(self) -> None:
        snapshot = AvailabilitySnapshot(booked=["2024-06-16", "2024-06-15"])
        response = AvailabilityResponse.from_snapshot("prop-001", snapshot)

        assert response.booked_dates == [dt.date(2024, 6, 15), dt.date(2024, 6, 16)]
        assert response.checkout_only_dates == []


class TestErrors:
    """Tests for error codes and responses."""

    def test_error_response_from_code(self) -> None:
        response = ErrorResponse.from_code(ErrorCode.INVALID_MONTH, details={"month": "2024-13"})

        assert response.success is False
        assert response.error_code == ErrorCode.INVALID_MONTH
        assert "YYYY-MM" in response.message
        assert response.recovery

    def test_calendar_error_custom_message(self) -> None:
        error = CalendarError(ErrorCode.AVAILABILITY_UNAVAILABLE, message="Backend down")

        assert str(error) == "Backend down"
        assert error.to_response().message == "Backend down"

    def test_cursor_rejects_invalid_month(self) -> None:
        with pytest.raises(ValidationError):
            MonthCursor(year=2024, month=13)
