"""Calendar engine: grid, availability, classification, selection, navigation."""

from .availability import AvailabilityIndex, AvailabilityLoader, AvailabilitySource
from .classifier import DayClassifier, resolve_bounds
from .grid import GRID_SIZE, generate_grid, grid_start, grid_weeks
from .hover import compute_hover_preview
from .navigator import MonthNavigator
from .selection import RangeSelectionStateMachine
from .widget import AvailabilityCalendar

__all__ = [
    "AvailabilityCalendar",
    "AvailabilityIndex",
    "AvailabilityLoader",
    "AvailabilitySource",
    "DayClassifier",
    "GRID_SIZE",
    "MonthNavigator",
    "RangeSelectionStateMachine",
    "compute_hover_preview",
    "generate_grid",
    "grid_start",
    "grid_weeks",
    "resolve_bounds",
]
