"""Calendar grid generation.

Builds the fixed 6x7 grid for a month: trailing days of the previous month
up to the Sunday column of the 1st, every day of the month, then leading
days of the next month until all 42 slots are filled.
"""

import datetime as dt

from booking_calendar.models import GridSlot, MonthCursor

GRID_ROWS = 6
GRID_COLUMNS = 7
GRID_SIZE = GRID_ROWS * GRID_COLUMNS


def grid_start(cursor: MonthCursor) -> dt.date:
    """First date shown for a month: the Sunday on or before the 1st."""
    first = cursor.first_day
    # date.weekday(): Monday=0 ... Sunday=6
    offset = (first.weekday() + 1) % 7
    return first - dt.timedelta(days=offset)


def generate_grid(cursor: MonthCursor) -> list[GridSlot]:
    """Generate the 42 day slots for a month.

    Args:
        cursor: Month to display

    Returns:
        Slots in display order (row by row, Sunday first)
    """
    start = grid_start(cursor)
    slots = []
    for i in range(GRID_SIZE):
        day = start + dt.timedelta(days=i)
        slots.append(
            GridSlot(
                date=day,
                is_current_month=(day.year == cursor.year and day.month == cursor.month),
            )
        )
    return slots


def grid_weeks(slots: list[GridSlot]) -> list[list[GridSlot]]:
    """Split a flat grid into its 6 rows of 7 slots."""
    return [slots[i : i + GRID_COLUMNS] for i in range(0, len(slots), GRID_COLUMNS)]
