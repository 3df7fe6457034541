"""
Save-time feasibility verdict for a single course.

Combines every check the engine offers. The verdict separates blocking
issues (travel conflicts, blackout dates) from advisory ones that a user
may confirm and override (availability, qualification, capacity,
double-bookings). What to do with each category is up to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from planner.data.models import day_name

from .availability import unavailable_days
from .blackout import BlackoutHit, find_blackout_hits
from .conflicts import ConflictRecord, check_course_conflicts
from .qualification import has_sufficient_capacity, is_tutor_qualified
from .travel import check_tutor_travel_conflicts

if TYPE_CHECKING:
    from planner.data.models import Course, PlannerData


@dataclass
class CourseEvaluation:
    """Outcome of evaluating one course against a snapshot."""
    course: Course
    tutor_unavailable_days: list[int] = field(default_factory=list)
    location_unavailable_days: list[int] = field(default_factory=list)
    qualified: bool = True
    capacity_ok: bool = True
    conflicts: list[ConflictRecord] = field(default_factory=list)
    travel_conflicts: list[ConflictRecord] = field(default_factory=list)
    blackout_hits: list[BlackoutHit] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def tutor_available(self) -> bool:
        return not self.tutor_unavailable_days

    @property
    def location_available(self) -> bool:
        return not self.location_unavailable_days

    @property
    def can_save(self) -> bool:
        """No blocking issues; advisory warnings may still be present."""
        return not self.travel_conflicts and not self.blackout_hits

    @property
    def is_clean(self) -> bool:
        """Nothing to report at all."""
        return self.can_save and not self.warnings

    def to_dict(self) -> dict:
        return {
            "courseId": self.course.id,
            "canSave": self.can_save,
            "tutorAvailable": self.tutor_available,
            "locationAvailable": self.location_available,
            "qualified": self.qualified,
            "capacityOk": self.capacity_ok,
            "conflicts": [c.to_dict() for c in self.conflicts],
            "travelConflicts": [c.to_dict() for c in self.travel_conflicts],
            "blackoutHits": [h.to_dict() for h in self.blackout_hits],
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }


def _days_label(days: list[int]) -> str:
    return ", ".join(day_name(d) for d in days)


def evaluate_course(data: PlannerData, candidate: Course) -> CourseEvaluation:
    """
    Run every check against a candidate course.

    Args:
        data: Snapshot of tutors, locations, courses and blackout dates
        candidate: Course being created or edited

    Returns:
        CourseEvaluation with blocking errors and advisory warnings
    """
    result = CourseEvaluation(course=candidate)
    periods = data.config.periods
    window = f"{candidate.start_time}-{candidate.end_time}"

    tutor = data.get_tutor(candidate.tutor_id) if candidate.tutor_id is not None else None
    location = data.get_location(candidate.location_id) if candidate.location_id is not None else None

    if candidate.tutor_id is not None:
        result.tutor_unavailable_days = unavailable_days(
            tutor, candidate.days_of_week, candidate.start_time, candidate.end_time, periods
        )
        if result.tutor_unavailable_days:
            result.warnings.append(
                f"{data.tutor_name(candidate.tutor_id)} is not marked as available on "
                f"{_days_label(result.tutor_unavailable_days)} during {window}"
            )

    if candidate.location_id is not None:
        result.location_unavailable_days = unavailable_days(
            location, candidate.days_of_week, candidate.start_time, candidate.end_time, periods
        )
        if result.location_unavailable_days:
            result.warnings.append(
                f"{data.location_name(candidate.location_id)} is not marked as available on "
                f"{_days_label(result.location_unavailable_days)} during {window}"
            )

    result.qualified = is_tutor_qualified(candidate, candidate.tutor_id)
    if not result.qualified:
        result.warnings.append(
            f"{data.tutor_name(candidate.tutor_id)} is not qualified to teach "
            f'"{candidate.name or candidate.id}"'
        )

    result.capacity_ok = has_sufficient_capacity(candidate, location)
    if not result.capacity_ok:
        result.warnings.append(
            f"{candidate.student_count} students exceed the capacity of "
            f"{data.location_name(candidate.location_id)} ({location.capacity})"
        )

    result.conflicts = check_course_conflicts(data, candidate, include_travel=False)
    result.warnings.extend(c.message for c in result.conflicts)

    result.travel_conflicts = check_tutor_travel_conflicts(data, candidate)
    result.errors.extend(c.message for c in result.travel_conflicts)

    result.blackout_hits = find_blackout_hits(
        candidate, data.week1_start_date, data.unavailable_dates
    )
    for hit in result.blackout_hits:
        reason = f" ({hit.reason})" if hit.reason else ""
        result.errors.append(
            f"Week {hit.week} {day_name(hit.day)} falls on unavailable date "
            f"{hit.date.isoformat()}{reason}"
        )

    return result


def evaluate_all_courses(data: PlannerData) -> list[CourseEvaluation]:
    """Evaluate every course in the snapshot."""
    return [evaluate_course(data, course) for course in data.courses]
