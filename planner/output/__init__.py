"""Report views for planner snapshots."""

from .reports import (
    ConflictsReport,
    CourseRow,
    ResourceSchedule,
    conflicts_report,
    course_list,
    courses_at_time_slot,
    location_utilization,
    tutor_schedule,
    upcoming_courses,
)

__all__ = [
    "ConflictsReport",
    "CourseRow",
    "ResourceSchedule",
    "conflicts_report",
    "course_list",
    "courses_at_time_slot",
    "location_utilization",
    "tutor_schedule",
    "upcoming_courses",
]
