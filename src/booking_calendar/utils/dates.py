"""Calendar-date helpers.

All boundary values are ``YYYY-MM-DD`` strings and all internal values are
``datetime.date``. Datetimes are truncated to their calendar date without any
timezone conversion, so a booked-date string and a generated grid date always
compare equal when they name the same day.
"""

import datetime as dt
import re

DATE_FORMAT = "%Y-%m-%d"

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: str) -> dt.date:
    """Parse a date string in YYYY-MM-DD format.

    Args:
        value: Date string (e.g., '2024-06-10')

    Returns:
        Parsed calendar date

    Raises:
        ValueError: If the string is not a valid YYYY-MM-DD date
    """
    if not _DATE_PATTERN.match(value):
        raise ValueError(f"Invalid date '{value}'. Expected YYYY-MM-DD format.")
    return dt.datetime.strptime(value, DATE_FORMAT).date()


def coerce_date(value: object) -> dt.date:
    """Convert a boundary value to a calendar date.

    Accepts ``date``, ``datetime`` (time of day dropped) and YYYY-MM-DD
    strings. An ISO datetime string is cut at its date part.

    Raises:
        ValueError: If the value cannot be read as a calendar date
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if "T" in text:
            text = text.split("T", 1)[0]
        return parse_date(text)
    raise ValueError(f"Cannot interpret {value!r} as a calendar date")


def parse_optional_date(value: object) -> dt.date | None:
    """Lenient variant of coerce_date for host-supplied values.

    Empty and unparsable values yield None instead of raising.
    """
    if value is None or value == "":
        return None
    try:
        return coerce_date(value)
    except ValueError:
        return None


def to_date_string(value: dt.date | None) -> str:
    """Serialize a date for the boundary; empty string when unset."""
    return value.isoformat() if value else ""


def date_range(start: dt.date, end: dt.date) -> list[dt.date]:
    """Generate list of dates from start to end (exclusive of end)."""
    return [start + dt.timedelta(days=i) for i in range((end - start).days)]


def nights_between(start: dt.date | None, end: dt.date | None) -> int:
    """Number of nights in a stay; 0 when either endpoint is missing."""
    if not start or not end:
        return 0
    return (end - start).days
