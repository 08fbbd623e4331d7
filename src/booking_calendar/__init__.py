"""Availability calendar engine for vacation rental bookings."""

__version__ = "0.1.0"
