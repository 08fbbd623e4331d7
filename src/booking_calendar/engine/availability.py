"""Availability index and its asynchronous loader.

The index answers "is this date booked / checkout-only" in O(1) for one
property. The loader refreshes it from an AvailabilitySource as an asyncio
task bound to the widget's lifetime:

- every load gets a generation number; only the latest generation may
  write to the index (last request wins)
- starting a new load cancels the superseded task
- after close(), no load result mutates state
- failures are kept as a verbatim error message; there is no auto-retry
"""

import asyncio
import datetime as dt
from typing import Callable, Protocol

from booking_calendar.models import (
    ERROR_MESSAGES,
    AvailabilitySnapshot,
    CalendarError,
    ErrorCode,
    LoadState,
)
from booking_calendar.utils.logging import get_logger, log_availability_load

logger = get_logger(__name__)


class AvailabilitySource(Protocol):
    """External collaborator that supplies booked/checkout-only dates."""

    async def fetch(self, property_id: str) -> AvailabilitySnapshot:
        """Load availability for a property.

        Raises:
            Exception: Any failure; its message is shown to the user as-is
        """
        ...


class AvailabilityIndex:
    """Booked and checkout-only dates for a single property."""

    def __init__(self) -> None:
        self.property_id: str | None = None
        self._booked: frozenset[dt.date] = frozenset()
        self._checkout_only: frozenset[dt.date] = frozenset()

    @property
    def booked(self) -> frozenset[dt.date]:
        return self._booked

    @property
    def checkout_only(self) -> frozenset[dt.date]:
        return self._checkout_only

    def replace(self, property_id: str, snapshot: AvailabilitySnapshot) -> None:
        """Replace the index content wholesale with a new snapshot.

        A date reported in both sets is treated as booked.
        """
        overlap = snapshot.overlap
        if overlap:
            logger.warning(
                "Dates reported both booked and checkout-only; treating as booked",
                extra={
                    "property_id": property_id,
                    "dates": sorted(d.isoformat() for d in overlap),
                },
            )
        self.property_id = property_id
        self._booked = snapshot.booked
        self._checkout_only = snapshot.checkout_only - snapshot.booked

    def clear(self) -> None:
        self.property_id = None
        self._booked = frozenset()
        self._checkout_only = frozenset()

    def is_booked(self, value: dt.date) -> bool:
        return value in self._booked

    def is_checkout_only(self, value: dt.date) -> bool:
        return value in self._checkout_only

    def has_booked_between(self, start: dt.date, end: dt.date) -> bool:
        """Whether any booked date lies strictly between two endpoints."""
        low, high = min(start, end), max(start, end)
        return any(low < d < high for d in self._booked)


class AvailabilityLoader:
    """Runs availability loads for one widget and tracks their state."""

    def __init__(
        self,
        source: AvailabilitySource | None,
        index: AvailabilityIndex | None = None,
        on_state_change: Callable[[LoadState], None] | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            source: Availability data source (None disables loading)
            index: Index to populate; a fresh one is created if omitted
            on_state_change: Called synchronously whenever the load state changes
        """
        self._source = source
        self.index = index or AvailabilityIndex()
        self._on_state_change = on_state_change
        self._state = LoadState.IDLE
        self._error: str | None = None
        self._property_id: str | None = None
        self._generation = 0
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def error(self) -> str | None:
        """Verbatim error message of the last failed load."""
        return self._error

    @property
    def property_id(self) -> str | None:
        return self._property_id

    @property
    def closed(self) -> bool:
        return self._closed

    def load(self, property_id: str | None) -> asyncio.Task[None] | None:
        """Start loading availability for a property.

        Must be called from a running event loop. A load already in flight
        is superseded: it is cancelled and its result, should it still
        arrive, is discarded.

        Args:
            property_id: Property to load; None/empty clears the index

        Returns:
            The load task, or None when nothing is loaded
        """
        if self._closed:
            logger.debug("Ignoring load request on closed loader")
            return None

        self._generation += 1
        generation = self._generation
        self._property_id = property_id or None
        self._cancel_task()

        if not property_id or self._source is None:
            self.index.clear()
            self._set_state(LoadState.IDLE, None)
            return None

        self._set_state(LoadState.LOADING, None)
        log_availability_load(
            logger, "load_started", property_id=property_id, generation=generation
        )
        self._task = asyncio.get_running_loop().create_task(
            self._run(generation, property_id),
            name=f"availability-load-{property_id}-{generation}",
        )
        return self._task

    def retry(self) -> asyncio.Task[None] | None:
        """Reload the current property (host-triggered retry)."""
        return self.load(self._property_id)

    async def wait(self) -> None:
        """Wait until the latest load has settled."""
        while self._task is not None and not self._task.done():
            task = self._task
            await asyncio.gather(task, return_exceptions=True)

    def close(self) -> None:
        """Stop accepting results; cancels any load in flight."""
        self._closed = True
        self._cancel_task()

    async def _run(self, generation: int, property_id: str) -> None:
        try:
            snapshot = await self._source.fetch(property_id)  # type: ignore[union-attr]
        except asyncio.CancelledError:
            log_availability_load(
                logger,
                "load_settled",
                property_id=property_id,
                generation=generation,
                result="cancelled",
            )
            raise
        except Exception as e:
            if not self._is_current(generation):
                log_availability_load(
                    logger,
                    "load_settled",
                    property_id=property_id,
                    generation=generation,
                    result="discarded",
                )
                return
            message = _error_message(e)
            log_availability_load(
                logger,
                "load_settled",
                property_id=property_id,
                generation=generation,
                result="error",
                error=message,
            )
            # Stale index content stays in memory but is not consulted in ERROR
            self._set_state(LoadState.ERROR, message)
            return

        if not self._is_current(generation):
            log_availability_load(
                logger,
                "load_settled",
                property_id=property_id,
                generation=generation,
                result="discarded",
            )
            return

        self.index.replace(property_id, snapshot)
        self._set_state(LoadState.READY, None)
        log_availability_load(
            logger,
            "load_settled",
            property_id=property_id,
            generation=generation,
            result="success",
            booked=len(self.index.booked),
            checkout_only=len(self.index.checkout_only),
        )

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _set_state(self, state: LoadState, error: str | None) -> None:
        changed = state != self._state or error != self._error
        self._state = state
        self._error = error
        if changed and self._on_state_change is not None:
            try:
                self._on_state_change(state)
            except Exception:
                logger.exception("Load state listener raised")


def _error_message(error: Exception) -> str:
    """Message shown to the user for a failed load."""
    if isinstance(error, CalendarError):
        return error.message
    return str(error) or ERROR_MESSAGES[ErrorCode.AVAILABILITY_UNAVAILABLE]
