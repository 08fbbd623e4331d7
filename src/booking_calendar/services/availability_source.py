"""Availability sources for the calendar engine.

DynamoDBAvailabilitySource derives a property's booked and checkout-only
dates from its reservations and host blocks:

- a pending or confirmed reservation books its nights [check_in, check_out)
- a host-blocked date is booked
- a date that follows a booked night and is not booked itself is
  checkout-only (a stay ends that morning, a new one may start)

StaticAvailabilitySource serves fixed snapshots from memory.
"""

import asyncio
import datetime as dt
from typing import Any, Iterable, Mapping

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from booking_calendar.models import (
    BLOCKING_RESERVATION_STATUSES,
    AvailabilityLoadError,
    AvailabilitySnapshot,
    CalendarError,
    ErrorCode,
)
from booking_calendar.services.dynamodb import DynamoDBService
from booking_calendar.utils.dates import coerce_date, date_range
from booking_calendar.utils.logging import get_logger

logger = get_logger(__name__)


def derive_checkout_only(booked: frozenset[dt.date]) -> frozenset[dt.date]:
    """Days right after a booked night that are free themselves."""
    following = (d + dt.timedelta(days=1) for d in booked if d < dt.date.max)
    return frozenset(d for d in following if d not in booked)


def build_snapshot(
    reservations: Iterable[dict[str, Any]],
    blocked: Iterable[dict[str, Any]] = (),
) -> AvailabilitySnapshot:
    """Build a snapshot from reservation and blocked-date items.

    Items with unreadable dates or an empty stay are skipped with a warning.

    Args:
        reservations: Reservation items (check_in_date, check_out_date, status)
        blocked: Blocked-date items (date)

    Returns:
        Snapshot with booked and checkout-only dates
    """
    booked: set[dt.date] = set()

    for item in reservations:
        if item.get("status") not in {s.value for s in BLOCKING_RESERVATION_STATUSES}:
            continue
        try:
            check_in = coerce_date(item["check_in_date"])
            check_out = coerce_date(item["check_out_date"])
        except (KeyError, ValueError):
            logger.warning(
                "Skipping reservation with unreadable dates",
                extra={"reservation_id": str(item.get("reservation_id", ""))},
            )
            continue
        if check_out <= check_in:
            logger.warning(
                "Skipping reservation without nights",
                extra={"reservation_id": str(item.get("reservation_id", ""))},
            )
            continue
        booked.update(date_range(check_in, check_out))

    for item in blocked:
        try:
            booked.add(coerce_date(item["date"]))
        except (KeyError, ValueError):
            logger.warning("Skipping blocked date item", extra={"item": str(item)})

    booked_dates = frozenset(booked)
    return AvailabilitySnapshot(
        booked=booked_dates,
        checkout_only=derive_checkout_only(booked_dates),
    )


class DynamoDBAvailabilitySource:
    """Loads availability from the reservations and blocked-dates tables."""

    RESERVATIONS_TABLE = "reservations"
    RESERVATIONS_INDEX = "property_id-index"
    BLOCKED_DATES_TABLE = "blocked-dates"

    def __init__(self, db: DynamoDBService) -> None:
        """Initialize the source.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    async def fetch(self, property_id: str) -> AvailabilitySnapshot:
        """Load availability for a property.

        boto3 is blocking, so both queries run in worker threads.

        Raises:
            AvailabilityLoadError: If DynamoDB rejects a query
        """
        try:
            reservations, blocked = await asyncio.gather(
                asyncio.to_thread(self.get_reservations, property_id),
                asyncio.to_thread(self.get_blocked_dates, property_id),
            )
        except ClientError as e:
            aws_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                "DynamoDB availability query failed",
                extra={"property_id": property_id, "aws_error": aws_code},
            )
            raise AvailabilityLoadError(
                details={"property_id": property_id, "aws_error": aws_code}
            ) from e

        return build_snapshot(reservations, blocked)

    def get_reservations(self, property_id: str) -> list[dict[str, Any]]:
        """Reservations of a property that hold their nights."""
        return self.db.query(
            self.RESERVATIONS_TABLE,
            Key("property_id").eq(property_id),
            index_name=self.RESERVATIONS_INDEX,
            filter_expression=Attr("status").is_in(
                sorted(s.value for s in BLOCKING_RESERVATION_STATUSES)
            ),
        )

    def get_blocked_dates(self, property_id: str) -> list[dict[str, Any]]:
        """Host-blocked dates of a property, ascending."""
        return self.db.query(
            self.BLOCKED_DATES_TABLE, Key("property_id").eq(property_id)
        )

    def block_dates(
        self,
        property_id: str,
        dates: Iterable[dt.date],
        reason: str | None = None,
    ) -> int:
        """Mark dates as unavailable for a property.

        Dates that are already blocked keep their original reason.

        Args:
            property_id: Property to block
            dates: Dates to block
            reason: Optional note shown to the host

        Returns:
            Number of newly blocked dates
        """
        now = dt.datetime.now(dt.UTC).isoformat()
        count = 0
        for day in sorted(set(dates)):
            item: dict[str, Any] = {
                "property_id": property_id,
                "date": day.isoformat(),
                "created_at": now,
            }
            if reason:
                item["reason"] = reason
            if self.db.put_item(
                self.BLOCKED_DATES_TABLE,
                item,
                condition=Attr("property_id").not_exists(),
            ):
                count += 1
        logger.info(
            "Blocked dates",
            extra={"property_id": property_id, "count": count},
        )
        return count

    def unblock_dates(self, property_id: str, dates: Iterable[dt.date]) -> int:
        """Release host-blocked dates.

        Returns:
            Number of dates released
        """
        count = 0
        for day in sorted(set(dates)):
            self.db.delete_item(
                self.BLOCKED_DATES_TABLE,
                {"property_id": property_id, "date": day.isoformat()},
            )
            count += 1
        logger.info(
            "Unblocked dates",
            extra={"property_id": property_id, "count": count},
        )
        return count


class StaticAvailabilitySource:
    """Serves fixed availability snapshots, optionally after a delay."""

    def __init__(
        self,
        snapshots: Mapping[str, AvailabilitySnapshot | dict[str, Any]],
        delay: float = 0.0,
    ) -> None:
        """Initialize the source.

        Args:
            snapshots: Snapshot (or its dict form) per property id
            delay: Seconds to wait before answering
        """
        self.snapshots = {
            property_id: AvailabilitySnapshot.model_validate(snapshot)
            for property_id, snapshot in snapshots.items()
        }
        self.delay = delay

    async def fetch(self, property_id: str) -> AvailabilitySnapshot:
        """Return the stored snapshot.

        Raises:
            CalendarError: PROPERTY_NOT_FOUND for an unknown property
        """
        if self.delay:
            await asyncio.sleep(self.delay)
        snapshot = self.snapshots.get(property_id)
        if snapshot is None:
            raise CalendarError(
                ErrorCode.PROPERTY_NOT_FOUND, details={"property_id": property_id}
            )
        return snapshot

