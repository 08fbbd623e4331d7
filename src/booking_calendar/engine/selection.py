"""Two-click range selection state machine.

States (derived from the range):
    EMPTY         no dates chosen
    AWAITING_END  check-in chosen, check-out pending
    COMPLETE      both chosen, start_date <= end_date

Transitions on a click on a selectable day:
    EMPTY / COMPLETE -> AWAITING_END   clicked date is the new check-in
    AWAITING_END     -> COMPLETE       clicked >= start: clicked is the check-out
                                       clicked <  start: swap, clicked is the
                                       check-in and the old start the check-out

Clicks on non-selectable days are no-ops. Every change of the range notifies
all listeners synchronously with the boundary payload.
"""

import datetime as dt
from typing import Callable, Iterable

from booking_calendar.models import CalendarDay, DateRange, SelectionState
from booking_calendar.utils.logging import get_logger, log_selection_change

logger = get_logger(__name__)

SelectionListener = Callable[[dict[str, str]], None]
SpanGuard = Callable[[dt.date, dt.date], bool]


class RangeSelectionStateMachine:
    """Holds the selected range and applies click events to it."""

    def __init__(
        self,
        initial: DateRange | None = None,
        listeners: Iterable[SelectionListener] = (),
        span_guard: SpanGuard | None = None,
    ) -> None:
        """Initialize the state machine.

        Args:
            initial: Host-supplied starting range (EMPTY when omitted)
            listeners: Callbacks receiving {"start_date", "end_date"} strings
            span_guard: Optional check run before completing a range; returning
                False turns the completing click into a no-op
        """
        self._range = initial or DateRange()
        self._listeners: list[SelectionListener] = list(listeners)
        self._span_guard = span_guard

    @property
    def range(self) -> DateRange:
        return self._range

    @property
    def state(self) -> SelectionState:
        return self._range.state

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def click(self, day: CalendarDay) -> bool:
        """Apply a click on a classified day.

        Args:
            day: The clicked day, classified against the current selection

        Returns:
            True if the range changed
        """
        if not day.is_selectable:
            logger.debug(
                "Ignoring click on non-selectable day",
                extra={"date": day.date.isoformat(), "status": day.status.value},
            )
            return False

        clicked = day.date
        current = self._range

        start = current.start_date
        if current.state != SelectionState.AWAITING_END or start is None:
            return self._apply(DateRange(start_date=clicked))

        if self._span_guard is not None and not self._span_guard(start, clicked):
            logger.info(
                "Ignoring click: range would span booked dates",
                extra={"start_date": start.isoformat(), "date": clicked.isoformat()},
            )
            return False

        if clicked < start:
            return self._apply(DateRange(start_date=clicked, end_date=start))
        return self._apply(DateRange(start_date=start, end_date=clicked))

    def reset(self) -> bool:
        """Clear the selection.

        Returns:
            True if there was a selection to clear
        """
        return self._apply(DateRange())

    def _apply(self, new_range: DateRange) -> bool:
        if new_range == self._range:
            return False
        self._range = new_range
        self._notify()
        return True

    def _notify(self) -> None:
        payload = self._range.to_strings()
        log_selection_change(
            logger,
            start_date=payload["start_date"],
            end_date=payload["end_date"],
            state=self._range.state.value,
        )
        for listener in list(self._listeners):
            try:
                listener(dict(payload))
            except Exception:
                # A failing host callback must not break the interaction
                logger.exception("Selection listener raised")
