"""Course planner - constraint checks for recurring course timetables."""

from .data.models import Course, Location, PlannerData, Tutor, UnavailableDate
from .data.loader import load_planner_data
from .engine import (
    check_course_conflicts,
    check_tutor_travel_conflicts,
    detect_all_conflicts,
    evaluate_course,
    is_date_unavailable,
    is_location_available,
    is_tutor_available,
    sessions_overlap,
)
from .cli import app as cli_app

__all__ = [
    # Models
    "Course",
    "Location",
    "PlannerData",
    "Tutor",
    "UnavailableDate",
    "load_planner_data",
    # Engine
    "check_course_conflicts",
    "check_tutor_travel_conflicts",
    "detect_all_conflicts",
    "evaluate_course",
    "is_date_unavailable",
    "is_location_available",
    "is_tutor_available",
    "sessions_overlap",
    # CLI
    "cli_app",
]
