"""Availability models shared by the data sources, the engine and the API."""

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from booking_calendar.utils.dates import coerce_date


class AvailabilitySnapshot(BaseModel):
    """Result of one availability load for a property.

    Accepts dates as YYYY-MM-DD strings, dates or datetimes; everything is
    normalized to calendar dates.
    """

    model_config = ConfigDict(frozen=True)

    booked: frozenset[dt.date] = Field(default_factory=frozenset)
    checkout_only: frozenset[dt.date] = Field(default_factory=frozenset)

    @field_validator("booked", "checkout_only", mode="before")
    @classmethod
    def coerce_dates(cls, v: Any) -> frozenset[dt.date]:
        """Normalize every entry to a calendar date."""
        if v is None:
            return frozenset()
        if isinstance(v, (str, dt.date)):
            v = [v]
        return frozenset(coerce_date(item) for item in v)

    @property
    def overlap(self) -> frozenset[dt.date]:
        """Dates reported both booked and checkout-only."""
        return self.booked & self.checkout_only


class AvailabilityResponse(BaseModel):
    """Availability data for one property, as served over HTTP."""

    model_config = ConfigDict(
        strict=True,
        json_schema_extra={
            "examples": [
                {
                    "property_id": "prop-001",
                    "booked_dates": ["2024-06-14", "2024-06-15"],
                    "checkout_only_dates": ["2024-06-16"],
                }
            ]
        },
    )

    property_id: str = Field(..., description="Property identifier")
    booked_dates: list[dt.date] = Field(
        ...,
        description="Booked or host-blocked nights, ascending",
    )
    checkout_only_dates: list[dt.date] = Field(
        ...,
        description="Days on which a booking ends (check-out only), ascending",
    )

    @classmethod
    def from_snapshot(
        cls, property_id: str, snapshot: AvailabilitySnapshot
    ) -> "AvailabilityResponse":
        """Build the response from a loaded snapshot."""
        return cls(
            property_id=property_id,
            booked_dates=sorted(snapshot.booked),
            checkout_only_dates=sorted(snapshot.checkout_only),
        )
