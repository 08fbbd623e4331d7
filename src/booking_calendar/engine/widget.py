"""Availability calendar widget.

Composes the engine pieces for one property:

    MonthNavigator -> generate_grid -> DayClassifier -> CalendarView
                                         ^      ^
                       AvailabilityIndex-+      +- RangeSelectionStateMachine
                       (AvailabilityLoader)        + hover preview

The host drives it with navigation, click and hover calls (all synchronous)
and receives the selected range through on_change. Availability loads run as
asyncio tasks owned by the widget; they start on mount() and whenever the
property changes, and are cancelled by aclose().

Usage:
    calendar = AvailabilityCalendar(source, "prop-001", on_change=print)
    calendar.mount()
    await calendar.wait_until_loaded()
    calendar.click("2024-06-10")
    calendar.click("2024-06-20")
    view = calendar.render()
"""

import asyncio
import datetime as dt
from typing import Callable

from booking_calendar.config import CalendarSettings, get_settings
from booking_calendar.engine.availability import (
    AvailabilityIndex,
    AvailabilityLoader,
    AvailabilitySource,
)
from booking_calendar.engine.classifier import DayClassifier, resolve_bounds
from booking_calendar.engine.grid import generate_grid
from booking_calendar.engine.hover import compute_hover_preview
from booking_calendar.engine.navigator import MonthNavigator
from booking_calendar.engine.selection import RangeSelectionStateMachine, SelectionListener
from booking_calendar.models import (
    CalendarDay,
    CalendarView,
    DateRange,
    GridSlot,
    LoadState,
    MonthCursor,
    SelectionState,
)
from booking_calendar.utils.dates import parse_optional_date
from booking_calendar.utils.logging import get_logger

logger = get_logger(__name__)


class AvailabilityCalendar:
    """Booking calendar for a single property."""

    def __init__(
        self,
        source: AvailabilitySource | None = None,
        property_id: str | None = None,
        *,
        on_change: SelectionListener | None = None,
        on_load_state_change: Callable[[LoadState], None] | None = None,
        initial_start: str | None = None,
        initial_end: str | None = None,
        min_date: str | dt.date | None = None,
        max_date: str | dt.date | None = None,
        today: Callable[[], dt.date] = dt.date.today,
        settings: CalendarSettings | None = None,
    ) -> None:
        """Initialize the widget.

        Args:
            source: Availability data source (None: no bookings are known)
            property_id: Property whose availability is shown
            on_change: Called with {"start_date", "end_date"} on every selection change
            on_load_state_change: Called when the availability load state changes
            initial_start: Initial check-in (YYYY-MM-DD); bad values are ignored
            initial_end: Initial check-out (YYYY-MM-DD); bad values are ignored
            min_date: Minimum selectable date (defaults to today)
            max_date: Maximum selectable date (optional)
            today: Provider of the reference date
            settings: Calendar settings (defaults to environment settings)
        """
        self._settings = settings or get_settings()
        self._today = today
        self._property_id = property_id or None
        self._min_date = parse_optional_date(min_date)
        self._max_date = parse_optional_date(max_date)
        self._hovered: dt.date | None = None
        self._closed = False

        initial = self._initial_range(initial_start, initial_end)
        start_cursor = MonthCursor.from_date(initial.start_date) if initial.start_date else None
        self.navigator = MonthNavigator(start_cursor, today=today)
        self.index = AvailabilityIndex()
        self.loader = AvailabilityLoader(source, self.index, on_load_state_change)
        self.selection = RangeSelectionStateMachine(
            initial,
            listeners=[on_change] if on_change else [],
            span_guard=self._span_allowed if self._settings.block_booked_spans else None,
        )

    async def __aenter__(self) -> "AvailabilityCalendar":
        self.mount()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # Lifecycle

    def mount(self) -> asyncio.Task[None] | None:
        """Start the first availability load (requires a running event loop)."""
        return self.loader.load(self._property_id)

    def set_property(self, property_id: str | None) -> asyncio.Task[None] | None:
        """Scope the widget to another property and reload its availability.

        Returns:
            The new load task, or None when the property did not change
        """
        property_id = property_id or None
        if property_id == self._property_id and self.loader.state != LoadState.IDLE:
            return None
        self._property_id = property_id
        self._hovered = None
        return self.loader.load(property_id)

    def retry(self) -> asyncio.Task[None] | None:
        """Reload availability after a failure (the host's retry action)."""
        return self.loader.load(self._property_id)

    async def wait_until_loaded(self) -> LoadState:
        """Wait for the current load to settle and return the resulting state."""
        await self.loader.wait()
        return self.loader.state

    async def aclose(self) -> None:
        """Tear down the widget; pending load results are discarded."""
        self._closed = True
        self.loader.close()
        await asyncio.sleep(0)

    # State

    @property
    def property_id(self) -> str | None:
        return self._property_id

    @property
    def cursor(self) -> MonthCursor:
        return self.navigator.cursor

    @property
    def load_state(self) -> LoadState:
        return self.loader.state

    @property
    def error(self) -> str | None:
        return self.loader.error

    @property
    def selected_range(self) -> DateRange:
        return self.selection.range

    @property
    def selection_state(self) -> SelectionState:
        return self.selection.state

    @property
    def hovered_date(self) -> dt.date | None:
        return self._hovered

    @property
    def closed(self) -> bool:
        return self._closed

    # Navigation

    def next_month(self) -> MonthCursor:
        return self.navigator.next_month()

    def previous_month(self) -> MonthCursor:
        return self.navigator.previous_month()

    def go_to_month(self, value: str | dt.date) -> MonthCursor:
        """Jump to the month of a date; unparsable values leave the cursor alone."""
        target = parse_optional_date(value)
        if target is None:
            logger.debug("Ignoring navigation to invalid date", extra={"value": str(value)})
            return self.navigator.cursor
        return self.navigator.go_to(target)

    def go_to_today(self) -> MonthCursor:
        return self.navigator.go_to_today()

    # Interaction

    def click(self, value: str | dt.date) -> bool:
        """Handle a click on a day.

        Returns:
            True if the selection changed
        """
        if self._closed:
            return False
        target = parse_optional_date(value)
        if target is None:
            logger.debug("Ignoring click on invalid date", extra={"value": str(value)})
            return False
        self._hovered = None
        return self.selection.click(self.day(target))

    def hover(self, value: str | dt.date) -> bool:
        """Record the day under the pointer for the range preview.

        Only honored while awaiting the check-out and only for selectable days.

        Returns:
            True if the hovered day was recorded
        """
        if self._closed or self.selection.state != SelectionState.AWAITING_END:
            return False
        target = parse_optional_date(value)
        if target is None or not self.day(target).is_selectable:
            return False
        self._hovered = target
        return True

    def clear_hover(self) -> None:
        """Drop the hover preview (pointer left the grid)."""
        self._hovered = None

    def clear_selection(self) -> bool:
        """Clear the selected range, notifying the host if it changed."""
        self._hovered = None
        return self.selection.reset()

    # Rendering

    def classifier(self) -> DayClassifier:
        """Classifier for the current state of the widget."""
        today = self._today()
        minimum, maximum = resolve_bounds(
            today,
            self._min_date,
            self._max_date,
            self._settings.booking_window_days,
        )
        return DayClassifier(
            today,
            availability=self.index,
            load_state=self.loader.state,
            min_date=minimum,
            max_date=maximum,
            checkout_only_policy=self._settings.checkout_only_policy,
        )

    def day(self, value: dt.date) -> CalendarDay:
        """Classify a single date against the current state."""
        cursor = self.navigator.cursor
        slot = GridSlot(
            date=value,
            is_current_month=(value.year == cursor.year and value.month == cursor.month),
        )
        return self.classifier().classify(slot, self.selection.range)

    def render(self) -> CalendarView:
        """Build the render-ready view of the displayed month."""
        cursor = self.navigator.cursor
        slots = generate_grid(cursor)
        selection = self.selection.range

        hover_preview: frozenset[dt.date] = frozenset()
        if selection.state == SelectionState.AWAITING_END:
            hover_preview = compute_hover_preview(
                selection.start_date, self._hovered, [slot.date for slot in slots]
            )

        days = self.classifier().classify_all(slots, selection, hover_preview)
        return CalendarView(
            cursor=cursor,
            label=cursor.label,
            days=days,
            load_state=self.loader.state,
            error=self.loader.error,
            selection=selection,
            selection_state=selection.state,
            nights=selection.nights,
        )

    def _span_allowed(self, start: dt.date, end: dt.date) -> bool:
        return not self.index.has_booked_between(start, end)

    @staticmethod
    def _initial_range(start: str | None, end: str | None) -> DateRange:
        initial = DateRange.from_strings(start, end)
        if (start and initial.start_date is None) or (
            end and initial.end_date is None
        ):
            # One bad boundary drops the whole initial selection
            logger.warning(
                "Ignoring invalid initial selection",
                extra={"initial_start": start or "", "initial_end": end or ""},
            )
            return DateRange()
        return initial
