"""Hover preview of a tentative range.

While only a check-in date is chosen, pointing at another day previews the
range the next click would produce. Hovering before the start previews the
swapped range. The preview is recomputed from scratch on every pointer move.
"""

import datetime as dt
from typing import Iterable


def compute_hover_preview(
    start: dt.date | None,
    hovered: dt.date | None,
    dates: Iterable[dt.date],
) -> frozenset[dt.date]:
    """Dates of the visible grid covered by the tentative range.

    Args:
        start: Chosen check-in date
        hovered: Day under the pointer
        dates: Dates currently visible

    Returns:
        Every visible date between start and hovered, both inclusive;
        empty when either is missing
    """
    if start is None or hovered is None:
        return frozenset()
    low, high = min(start, hovered), max(start, hovered)
    return frozenset(d for d in dates if low <= d <= high)
