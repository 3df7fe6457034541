"""
Scheduling constraint engine.

Pure functions over a PlannerData snapshot: availability, overlap,
conflict, travel-time, qualification, capacity and blackout checks. Nothing
here mutates its inputs or caches results between calls.
"""

from __future__ import annotations

from .calendar import (
    align_week1_start,
    course_occurrence_dates,
    day_offset,
    get_current_week,
    get_week_start_date,
    occurrence_date,
    parse_calendar_date,
)

from .availability import (
    available_spans,
    is_available,
    is_location_available,
    is_tutor_available,
    unavailable_days,
)

from .overlap import (
    days_overlap,
    sessions_overlap,
    times_overlap,
    weeks_overlap,
)

from .conflicts import (
    ConflictKind,
    ConflictRecord,
    check_course_conflicts,
    conflicts_for_course,
    detect_all_conflicts,
)

from .travel import check_tutor_travel_conflicts

from .qualification import (
    QualificationIndex,
    has_sufficient_capacity,
    is_tutor_qualified,
)

from .blackout import (
    BlackoutHit,
    find_blackout_hits,
    find_unavailable_entry,
    is_date_unavailable,
)

from .evaluation import (
    CourseEvaluation,
    evaluate_all_courses,
    evaluate_course,
)

__all__ = [
    # Calendar
    "align_week1_start",
    "course_occurrence_dates",
    "day_offset",
    "get_current_week",
    "get_week_start_date",
    "occurrence_date",
    "parse_calendar_date",
    # Availability
    "available_spans",
    "is_available",
    "is_location_available",
    "is_tutor_available",
    "unavailable_days",
    # Overlap
    "days_overlap",
    "sessions_overlap",
    "times_overlap",
    "weeks_overlap",
    # Conflicts
    "ConflictKind",
    "ConflictRecord",
    "check_course_conflicts",
    "conflicts_for_course",
    "detect_all_conflicts",
    "check_tutor_travel_conflicts",
    # Qualification and capacity
    "QualificationIndex",
    "has_sufficient_capacity",
    "is_tutor_qualified",
    # Blackout dates
    "BlackoutHit",
    "find_blackout_hits",
    "find_unavailable_entry",
    "is_date_unavailable",
    # Evaluation
    "CourseEvaluation",
    "evaluate_all_courses",
    "evaluate_course",
]
