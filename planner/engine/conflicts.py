"""
Double-booking detection.

A conflict is emitted for every pair of overlapping courses that share a
tutor, and separately for every pair that shares a location. No
deduplication is done: three mutually overlapping courses with the same
tutor yield three records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from .overlap import sessions_overlap

if TYPE_CHECKING:
    from planner.data.models import Course, PlannerData

logger = logging.getLogger(__name__)


class ConflictKind(str, Enum):
    """What a conflict record is about."""
    TUTOR = "tutor"
    LOCATION = "location"
    TRAVEL = "travel"


@dataclass
class ConflictRecord:
    """
    One conflict between a course and another course.

    Travel records are blocking; tutor and location double-bookings are
    advisory and may be overridden by the caller.
    """
    kind: ConflictKind
    message: str
    course: Course
    conflicting_course: Course
    resource_id: Optional[str] = None
    day: Optional[int] = None
    required_minutes: Optional[int] = None
    available_minutes: Optional[int] = None

    @property
    def type(self) -> str:
        """'travel' for travel records, 'error' for double-bookings."""
        return "travel" if self.kind == ConflictKind.TRAVEL else "error"

    @property
    def is_blocking(self) -> bool:
        return self.kind == ConflictKind.TRAVEL

    def to_dict(self) -> dict[str, Any]:
        """
        JSON-serializable form.

        ``courseId`` is the course being checked (``course1`` in whole-set
        detection) and ``conflictingCourseId`` the other course (``course2``,
        or ``conflictingCourse`` for a single candidate). Courses are
        referenced by ID; ``type`` is ``"travel"`` or ``"error"``.
        """
        result: dict[str, Any] = {
            "type": self.type,
            "kind": self.kind.value,
            "message": self.message,
            "courseId": self.course.id,
            "conflictingCourseId": self.conflicting_course.id,
            "resourceId": self.resource_id,
        }
        if self.kind == ConflictKind.TRAVEL:
            result["day"] = self.day
            result["requiredMinutes"] = self.required_minutes
            result["availableMinutes"] = self.available_minutes
        return result

    def __str__(self) -> str:
        return self.message


def _course_label(course: Course) -> str:
    return course.name or course.id


def _pair_conflicts(data: PlannerData, course: Course, other: Course) -> list[ConflictRecord]:
    """Pairwise records for two courses already known to overlap."""
    records: list[ConflictRecord] = []

    if course.tutor_id is not None and course.tutor_id == other.tutor_id:
        records.append(ConflictRecord(
            kind=ConflictKind.TUTOR,
            message=(
                f'Tutor {data.tutor_name(course.tutor_id)} is double-booked: '
                f'"{_course_label(course)}" and "{_course_label(other)}"'
            ),
            course=course,
            conflicting_course=other,
            resource_id=course.tutor_id,
        ))

    if course.location_id is not None and course.location_id == other.location_id:
        records.append(ConflictRecord(
            kind=ConflictKind.LOCATION,
            message=(
                f'Location {data.location_name(course.location_id)} is double-booked: '
                f'"{_course_label(course)}" and "{_course_label(other)}"'
            ),
            course=course,
            conflicting_course=other,
            resource_id=course.location_id,
        ))

    return records


def detect_all_conflicts(data: PlannerData) -> list[ConflictRecord]:
    """
    Find every tutor and location double-booking in the snapshot.

    Each unordered pair of distinct courses is examined once.

    Args:
        data: Snapshot whose courses are compared

    Returns:
        Conflict records in course order
    """
    conflicts: list[ConflictRecord] = []
    courses = data.courses

    for i, course in enumerate(courses):
        for other in courses[i + 1:]:
            if course.id == other.id:
                continue
            if sessions_overlap(course, other):
                conflicts.extend(_pair_conflicts(data, course, other))

    logger.debug("Detected %d conflicts across %d courses", len(conflicts), len(courses))
    return conflicts


def check_course_conflicts(
    data: PlannerData,
    candidate: Course,
    include_travel: bool = True,
) -> list[ConflictRecord]:
    """
    Conflicts of one candidate course against every other course.

    The candidate may or may not already be in ``data.courses``; a course
    with the same ID is always skipped. Travel-time conflicts are appended
    unless ``include_travel`` is False.
    """
    from .travel import check_tutor_travel_conflicts

    conflicts: list[ConflictRecord] = []

    for existing in data.courses:
        if existing.id == candidate.id:
            continue
        if sessions_overlap(candidate, existing):
            conflicts.extend(_pair_conflicts(data, candidate, existing))

    if include_travel:
        conflicts.extend(check_tutor_travel_conflicts(data, candidate))

    return conflicts


def conflicts_for_course(conflicts: list[ConflictRecord], course_id: str) -> list[ConflictRecord]:
    """Records that involve the given course on either side."""
    return [
        c for c in conflicts
        if c.course.id == course_id or c.conflicting_course.id == course_id
    ]
