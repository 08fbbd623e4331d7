"""Unit tests for the range selection state machine.

Tests for:
- Two-click range selection and restarts
- Swap when the second click precedes the first
- Ordering of complete ranges
- Change notifications
- Booked-span guard
"""

import datetime as dt
import itertools
from typing import Any

import pytest

from booking_calendar.engine.availability import AvailabilityIndex
from booking_calendar.engine.classifier import DayClassifier
from booking_calendar.engine.selection import RangeSelectionStateMachine
from booking_calendar.models import (
    AvailabilitySnapshot,
    CalendarDay,
    DateRange,
    GridSlot,
    SelectionState,
)


@pytest.fixture
def classifier(today: dt.date) -> DayClassifier:
    """Classifier for June 2024 with 2024-06-15 booked."""
    index = AvailabilityIndex()
    index.replace("prop-001", AvailabilitySnapshot(booked=["2024-06-15"]))
    return DayClassifier(today, availability=index)


@pytest.fixture
def notifications() -> list[dict[str, str]]:
    return []


@pytest.fixture
def machine(notifications: list[dict[str, str]]) -> RangeSelectionStateMachine:
    return RangeSelectionStateMachine(listeners=[notifications.append])


def click(
    machine: RangeSelectionStateMachine, classifier: DayClassifier, value: str
) -> bool:
    day: CalendarDay = classifier.classify(
        GridSlot(date=dt.date.fromisoformat(value), is_current_month=True),
        machine.range,
    )
    return machine.click(day)


class TestTwoClickSelection:
    """Tests for the EMPTY -> AWAITING_END -> COMPLETE flow."""

    def test_booked_click_is_noop_then_range_completes(
        self,
        machine: RangeSelectionStateMachine,
        classifier: DayClassifier,
        notifications: list[dict[str, str]],
    ) -> None:
        """Clicking a booked day does nothing; two free days make a range."""
        assert click(machine, classifier, "2024-06-15") is False
        assert machine.state == SelectionState.EMPTY
        assert notifications == []

        click(machine, classifier, "2024-06-10")
        click(machine, classifier, "2024-06-20")

        assert machine.state == SelectionState.COMPLETE
        assert machine.range == DateRange(
            start_date=dt.date(2024, 6, 10), end_date=dt.date(2024, 6, 20)
        )
        assert notifications[-1] == {"start_date": "2024-06-10", "end_date": "2024-06-20"}

    def test_first_click_notifies_with_empty_end(
        self,
        machine: RangeSelectionStateMachine,
        classifier: DayClassifier,
        notifications: list[dict[str, str]],
    ) -> None:
        click(machine, classifier, "2024-06-10")

        assert machine.state == SelectionState.AWAITING_END
        assert notifications == [{"start_date": "2024-06-10", "end_date": ""}]

    def test_click_while_complete_starts_over(
        self, machine: RangeSelectionStateMachine, classifier: DayClassifier
    ) -> None:
        click(machine, classifier, "2024-06-10")
        click(machine, classifier, "2024-06-12")
        click(machine, classifier, "2024-06-25")

        assert machine.state == SelectionState.AWAITING_END
        assert machine.range.start_date == dt.date(2024, 6, 25)
        assert machine.range.end_date is None

    def test_same_day_twice_is_zero_night_range(
        self, machine: RangeSelectionStateMachine, classifier: DayClassifier
    ) -> None:
        click(machine, classifier, "2024-06-10")
        click(machine, classifier, "2024-06-10")

        assert machine.state == SelectionState.COMPLETE
        assert machine.range.nights == 0

    def test_past_click_is_noop(
        self,
        machine: RangeSelectionStateMachine,
        classifier: DayClassifier,
        notifications: list[dict[str, str]],
    ) -> None:
        assert click(machine, classifier, "2024-05-31") is False
        assert notifications == []


class TestSwap:
    """Tests for out-of-order second clicks."""

    def test_earlier_second_click_swaps(
        self, machine: RangeSelectionStateMachine, classifier: DayClassifier
    ) -> None:
        click(machine, classifier, "2024-06-10")
        click(machine, classifier, "2024-06-05")

        assert machine.state == SelectionState.COMPLETE
        assert machine.range.start_date == dt.date(2024, 6, 5)
        assert machine.range.end_date == dt.date(2024, 6, 10)

    def test_complete_ranges_are_always_ordered(self, classifier: DayClassifier) -> None:
        """Every click sequence over a set of days keeps start <= end."""
        days = ["2024-06-03", "2024-06-10", "2024-06-15", "2024-06-20", "2024-06-28"]
        for sequence in itertools.permutations(days, 4):
            machine = RangeSelectionStateMachine()
            for value in sequence:
                click(machine, classifier, value)
                if machine.state == SelectionState.COMPLETE:
                    assert machine.range.start_date is not None
                    assert machine.range.end_date is not None
                    assert machine.range.start_date <= machine.range.end_date


class TestNotifications:
    """Tests for listener notification."""

    def test_listener_receives_copy(
        self, machine: RangeSelectionStateMachine, classifier: DayClassifier
    ) -> None:
        received: list[dict[str, str]] = []

        def mutate(payload: dict[str, str]) -> None:
            payload["start_date"] = "tampered"
            received.append(payload)

        machine.subscribe(mutate)
        click(machine, classifier, "2024-06-10")

        assert machine.range.start_date == dt.date(2024, 6, 10)
        assert received[0]["start_date"] == "tampered"

    def test_unsubscribe(
        self, classifier: DayClassifier, notifications: list[dict[str, str]]
    ) -> None:
        machine = RangeSelectionStateMachine()
        unsubscribe = machine.subscribe(notifications.append)
        click(machine, classifier, "2024-06-10")
        unsubscribe()
        click(machine, classifier, "2024-06-12")

        assert len(notifications) == 1

    def test_failing_listener_does_not_break_selection(
        self, classifier: DayClassifier, notifications: list[dict[str, str]]
    ) -> None:
        def broken(payload: dict[str, Any]) -> None:
            raise RuntimeError("host bug")

        machine = RangeSelectionStateMachine(listeners=[broken, notifications.append])
        click(machine, classifier, "2024-06-10")

        assert machine.state == SelectionState.AWAITING_END
        assert notifications == [{"start_date": "2024-06-10", "end_date": ""}]

    def test_reset_notifies_once(
        self,
        machine: RangeSelectionStateMachine,
        classifier: DayClassifier,
        notifications: list[dict[str, str]],
    ) -> None:
        click(machine, classifier, "2024-06-10")
        assert machine.reset() is True
        assert machine.reset() is False

        assert notifications[-1] == {"start_date": "", "end_date": ""}
        assert len(notifications) == 2

    def test_initial_range_does_not_notify(
        self, notifications: list[dict[str, str]]
    ) -> None:
        initial = DateRange(start_date=dt.date(2024, 6, 10), end_date=dt.date(2024, 6, 12))
        machine = RangeSelectionStateMachine(initial, listeners=[notifications.append])

        assert machine.state == SelectionState.COMPLETE
        assert notifications == []


class TestSpanGuard:
    """Tests for rejecting ranges across booked nights."""

    def test_guard_rejects_completing_click(self, classifier: DayClassifier) -> None:
        index = classifier.availability
        assert index is not None
        machine = RangeSelectionStateMachine(
            span_guard=lambda start, end: not index.has_booked_between(start, end)
        )

        click(machine, classifier, "2024-06-10")
        assert click(machine, classifier, "2024-06-20") is False
        assert machine.state == SelectionState.AWAITING_END

        assert click(machine, classifier, "2024-06-14") is True
        assert machine.state == SelectionState.COMPLETE

    def test_without_guard_range_may_span_booked_nights(
        self, machine: RangeSelectionStateMachine, classifier: DayClassifier
    ) -> None:
        click(machine, classifier, "2024-06-10")
        click(machine, classifier, "2024-06-20")

        assert machine.range.contains(dt.date(2024, 6, 15))
