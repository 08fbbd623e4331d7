"""Day classification.

Combines a grid slot with the availability index, a reference "today",
the selectable-date bounds and the current selection into a CalendarDay.

Selectability:
    date >= today, date >= min_date, date <= max_date, not booked,
    subject to the checkout-only policy, and never while availability is
    loading or failed to load.

Status precedence:
    PAST > LOADING / UNKNOWN > BOOKED > CHECKOUT_ONLY (within bounds) > UNAVAILABLE
    > AVAILABLE
"""

import datetime as dt

from booking_calendar.engine.availability import AvailabilityIndex
from booking_calendar.models import (
    CalendarDay,
    CheckoutOnlyPolicy,
    DateRange,
    DayStatus,
    GridSlot,
    LoadState,
    SelectionState,
)

EMPTY_RANGE = DateRange()


def resolve_bounds(
    today: dt.date,
    min_date: dt.date | None = None,
    max_date: dt.date | None = None,
    booking_window_days: int | None = None,
) -> tuple[dt.date, dt.date | None]:
    """Effective selectable-date bounds.

    Args:
        today: Reference date
        min_date: Host-supplied minimum (defaults to today)
        max_date: Host-supplied maximum (optional)
        booking_window_days: Configured window; caps the maximum at today + N

    Returns:
        (minimum, maximum) where maximum is None when unbounded
    """
    minimum = max(today, min_date) if min_date else today
    maximum = max_date
    if booking_window_days is not None:
        window_end = today + dt.timedelta(days=booking_window_days)
        maximum = min(maximum, window_end) if maximum else window_end
    return minimum, maximum


class DayClassifier:
    """Classifies grid slots for one render pass."""

    def __init__(
        self,
        today: dt.date,
        *,
        availability: AvailabilityIndex | None = None,
        load_state: LoadState = LoadState.READY,
        min_date: dt.date | None = None,
        max_date: dt.date | None = None,
        checkout_only_policy: CheckoutOnlyPolicy = CheckoutOnlyPolicy.ALLOW,
    ) -> None:
        """Initialize the classifier.

        Args:
            today: Reference date for past/today flags
            availability: Index to consult (None means no known bookings)
            load_state: State of the availability data
            min_date: Minimum selectable date (today is always a floor)
            max_date: Maximum selectable date (optional)
            checkout_only_policy: Whether checkout-only days may start a stay
        """
        self.today = today
        self.availability = availability
        self.load_state = load_state
        self.min_date = min_date
        self.max_date = max_date
        self.checkout_only_policy = checkout_only_policy

    @property
    def availability_known(self) -> bool:
        return self.load_state in (LoadState.READY, LoadState.IDLE)

    def is_booked(self, value: dt.date) -> bool:
        if not self.availability_known or self.availability is None:
            return False
        return self.availability.is_booked(value)

    def is_checkout_only(self, value: dt.date) -> bool:
        if not self.availability_known or self.availability is None:
            return False
        return self.availability.is_checkout_only(value)

    def within_bounds(self, value: dt.date) -> bool:
        if value < self.today:
            return False
        if self.min_date and value < self.min_date:
            return False
        if self.max_date and value > self.max_date:
            return False
        return True

    def is_selectable(self, value: dt.date, selection: DateRange = EMPTY_RANGE) -> bool:
        """Whether a date may become a range endpoint right now."""
        if not self.availability_known:
            return False
        if not self.within_bounds(value) or self.is_booked(value):
            return False
        if self.is_checkout_only(value):
            return self._checkout_only_allowed(value, selection)
        return True

    def classify(
        self,
        slot: GridSlot,
        selection: DateRange = EMPTY_RANGE,
        hover_preview: frozenset[dt.date] = frozenset(),
    ) -> CalendarDay:
        """Classify one grid slot.

        Args:
            slot: Grid slot to classify
            selection: Current selection
            hover_preview: Dates covered by the hover preview

        Returns:
            The classified day
        """
        value = slot.date
        is_past = value < self.today
        is_booked = self.is_booked(value)
        is_checkout_only = self.is_checkout_only(value)
        is_selectable = self.is_selectable(value, selection)

        return CalendarDay(
            date=value,
            is_current_month=slot.is_current_month,
            is_past=is_past,
            is_today=value == self.today,
            is_booked=is_booked,
            is_checkout_only=is_checkout_only,
            is_selectable=is_selectable,
            is_selected=selection.contains(value),
            is_range_start=selection.start_date == value,
            is_range_end=selection.end_date == value,
            is_hover_preview=value in hover_preview,
            status=self._status(
                is_past, is_booked, is_checkout_only, is_selectable, self.within_bounds(value)
            ),
        )

    def classify_all(
        self,
        slots: list[GridSlot],
        selection: DateRange = EMPTY_RANGE,
        hover_preview: frozenset[dt.date] = frozenset(),
    ) -> list[CalendarDay]:
        return [self.classify(slot, selection, hover_preview) for slot in slots]

    def _checkout_only_allowed(self, value: dt.date, selection: DateRange) -> bool:
        if self.checkout_only_policy == CheckoutOnlyPolicy.ALLOW:
            return True
        # Only a check-out may land on a checkout-only day; an earlier click
        # while awaiting the end would swap it into the check-in slot.
        return (
            selection.state == SelectionState.AWAITING_END
            and selection.start_date is not None
            and value >= selection.start_date
        )

    def _status(
        self,
        is_past: bool,
        is_booked: bool,
        is_checkout_only: bool,
        is_selectable: bool,
        in_bounds: bool,
    ) -> DayStatus:
        if is_past:
            return DayStatus.PAST
        if self.load_state == LoadState.LOADING:
            return DayStatus.LOADING
        if self.load_state == LoadState.ERROR:
            return DayStatus.UNKNOWN
        if is_booked:
            return DayStatus.BOOKED
        if is_checkout_only and in_bounds:
            return DayStatus.CHECKOUT_ONLY
        if not is_selectable:
            return DayStatus.UNAVAILABLE
        return DayStatus.AVAILABLE
