"""Data models and loading utilities."""

from .loader import (
    DataValidationError,
    fill_reverse_travel_times,
    load_planner_data,
    normalize_planner_data,
    parse_planner_data,
)
from .models import (
    Course,
    CustomAvailability,
    DisplaySettings,
    Location,
    PeriodWindow,
    PlannerConfig,
    PlannerData,
    Tutor,
    UnavailableDate,
)

__all__ = [
    # Loader
    "DataValidationError",
    "fill_reverse_travel_times",
    "load_planner_data",
    "normalize_planner_data",
    "parse_planner_data",
    # Models
    "Course",
    "CustomAvailability",
    "DisplaySettings",
    "Location",
    "PeriodWindow",
    "PlannerConfig",
    "PlannerData",
    "Tutor",
    "UnavailableDate",
]
