"""
Read-only report views over a planner snapshot.

Each function returns plain data (dataclasses and lists) so it can be
rendered by the CLI or serialized to JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from planner.data.models import day_name, time_to_minutes
from planner.engine.conflicts import ConflictKind, ConflictRecord, detect_all_conflicts
from planner.engine.overlap import weeks_overlap

if TYPE_CHECKING:
    from planner.data.models import Course, PlannerData


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CourseRow:
    """One course as shown in a report table."""
    course_id: str
    name: str
    days: str
    time: str
    weeks: str
    tutor: str
    location: str
    start_week: int
    duration: int
    funded: bool
    student_count: Optional[int] = None

    @classmethod
    def from_course(cls, data: PlannerData, course: Course) -> CourseRow:
        weeks = (
            f"{course.start_week}-{course.end_week}"
            if course.duration > 1 else str(course.start_week)
        )
        return cls(
            course_id=course.id,
            name=course.name or course.id,
            days=", ".join(day_name(d)[:3] for d in course.days_of_week),
            time=f"{course.start_time}-{course.end_time}",
            weeks=weeks,
            tutor=data.tutor_name(course.tutor_id),
            location=data.location_name(course.location_id),
            start_week=course.start_week,
            duration=course.duration,
            funded=course.funded,
            student_count=course.student_count,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "courseId": self.course_id,
            "name": self.name,
            "days": self.days,
            "time": self.time,
            "weeks": self.weeks,
            "tutor": self.tutor,
            "location": self.location,
            "startWeek": self.start_week,
            "duration": self.duration,
            "funded": self.funded,
            "studentCount": self.student_count,
        }


@dataclass
class ResourceSchedule:
    """Courses grouped under one tutor or location."""
    id: str
    name: str
    rows: list[CourseRow] = field(default_factory=list)
    weekly_minutes: int = 0

    @property
    def course_count(self) -> int:
        return len(self.rows)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "weeklyMinutes": self.weekly_minutes,
            "courses": [r.to_dict() for r in self.rows],
        }


@dataclass
class ConflictsReport:
    """Summary of all double-bookings."""
    conflicts: list[ConflictRecord] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    @property
    def tutor_conflicts(self) -> int:
        return sum(1 for c in self.conflicts if c.kind == ConflictKind.TUTOR)

    @property
    def location_conflicts(self) -> int:
        return sum(1 for c in self.conflicts if c.kind == ConflictKind.LOCATION)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": len(self.conflicts),
            "tutorConflicts": self.tutor_conflicts,
            "locationConflicts": self.location_conflicts,
            "conflicts": [c.to_dict() for c in self.conflicts],
        }


# =============================================================================
# Helper Functions
# =============================================================================

def _sort_key(course: Course) -> tuple:
    return (course.start_week, min(course.days_of_week), course.start_minutes)


def _weekly_minutes(courses: list[Course]) -> int:
    """Teaching minutes per week summed over all listed days."""
    return sum(c.duration_minutes * len(c.days_of_week) for c in courses)


# =============================================================================
# Reports
# =============================================================================

def tutor_schedule(data: PlannerData) -> list[ResourceSchedule]:
    """Courses per tutor, in tutor order."""
    schedules = []
    for tutor in data.tutors:
        courses = sorted(data.get_tutor_courses(tutor.id), key=_sort_key)
        schedules.append(ResourceSchedule(
            id=tutor.id,
            name=str(tutor),
            rows=[CourseRow.from_course(data, c) for c in courses],
            weekly_minutes=_weekly_minutes(courses),
        ))
    return schedules


def location_utilization(data: PlannerData) -> list[ResourceSchedule]:
    """Courses per location, in location order."""
    schedules = []
    for location in data.locations:
        courses = sorted(data.get_location_courses(location.id), key=_sort_key)
        schedules.append(ResourceSchedule(
            id=location.id,
            name=str(location),
            rows=[CourseRow.from_course(data, c) for c in courses],
            weekly_minutes=_weekly_minutes(courses),
        ))
    return schedules


def course_list(data: PlannerData) -> list[CourseRow]:
    """All courses sorted by start week."""
    return [
        CourseRow.from_course(data, c)
        for c in sorted(data.courses, key=lambda c: c.start_week)
    ]


def upcoming_courses(
    data: PlannerData,
    current_week: Optional[int],
    limit: int = 10,
) -> list[Course]:
    """
    Courses running this week or starting next week.

    Sorted by start week, then by first day of the week.
    """
    if current_week is None:
        return []

    upcoming = [
        c for c in data.courses
        if c.start_week <= current_week + 1 and c.end_week >= current_week
    ]
    upcoming.sort(key=lambda c: (c.start_week, min(c.days_of_week)))
    return upcoming[:limit]


def courses_at_time_slot(
    data: PlannerData,
    start_week: int,
    end_week: int,
    day_of_week: int,
    slot_time: str,
) -> list[Course]:
    """
    Courses running in [start_week, end_week] on a day during an hourly slot.

    A course covers the slot when slot hour >= start hour and < end hour.
    """
    slot_hour = time_to_minutes(slot_time) // 60
    matches = []

    for course in data.courses:
        if not weeks_overlap(course.start_week, course.duration, start_week, end_week - start_week + 1):
            continue
        if day_of_week not in course.days_of_week:
            continue
        if course.start_minutes // 60 <= slot_hour < course.end_minutes // 60:
            matches.append(course)

    return matches


def conflicts_report(data: PlannerData) -> ConflictsReport:
    """Every double-booking in the snapshot."""
    return ConflictsReport(conflicts=detect_all_conflicts(data))
