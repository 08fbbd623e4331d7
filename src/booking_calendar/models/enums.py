"""Enumeration types for booking calendar models."""

from enum import Enum


class SelectionState(str, Enum):
    """Progress of the check-in/check-out range selection."""

    EMPTY = "empty"
    AWAITING_END = "awaiting_end"
    COMPLETE = "complete"


class LoadState(str, Enum):
    """Lifecycle of the availability data for the displayed property."""

    IDLE = "idle"  # No property id, nothing to load
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class DayStatus(str, Enum):
    """Primary availability status of a calendar day.

    Listed in precedence order: when several apply, the earlier one wins.
    """

    PAST = "past"
    LOADING = "loading"
    UNKNOWN = "unknown"  # Availability failed to load
    BOOKED = "booked"
    CHECKOUT_ONLY = "checkout_only"
    UNAVAILABLE = "unavailable"  # Outside bounds or blocked by policy
    AVAILABLE = "available"


class CheckoutOnlyPolicy(str, Enum):
    """Whether a checkout-only day may become a check-in date."""

    ALLOW = "allow"
    BLOCK_CHECK_IN = "block_check_in"


class ReservationStatus(str, Enum):
    """Reservation statuses stored in the reservations table."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Reservations in these statuses hold their nights
BLOCKING_RESERVATION_STATUSES = frozenset(
    {ReservationStatus.PENDING, ReservationStatus.CONFIRMED}
)
