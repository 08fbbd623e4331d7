"""Month navigation for the calendar widget."""

import datetime as dt
from typing import Callable

from booking_calendar.models import MonthCursor


class MonthNavigator:
    """Owns the month cursor and moves it backwards and forwards.

    Month arithmetic carries into the year, so navigation never fails.
    """

    def __init__(
        self,
        cursor: MonthCursor | None = None,
        today: Callable[[], dt.date] = dt.date.today,
    ) -> None:
        self._today = today
        self._cursor = cursor or MonthCursor.from_date(today())

    @property
    def cursor(self) -> MonthCursor:
        return self._cursor

    def next_month(self) -> MonthCursor:
        self._cursor = self._cursor.shift(1)
        return self._cursor

    def previous_month(self) -> MonthCursor:
        self._cursor = self._cursor.shift(-1)
        return self._cursor

    def go_to(self, value: dt.date) -> MonthCursor:
        """Jump to the month containing a date."""
        self._cursor = MonthCursor.from_date(value)
        return self._cursor

    def go_to_today(self) -> MonthCursor:
        return self.go_to(self._today())
