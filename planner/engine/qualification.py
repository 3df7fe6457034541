"""
Tutor qualification and location capacity checks.

Course.qualified_tutors is the only stored side of the tutor/course
qualification relation; the per-tutor view is computed on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from planner.data.models import Course, Location, PlannerData


def is_tutor_qualified(course: Course, tutor_id: Optional[str]) -> bool:
    """
    Check a tutor assignment against the course's qualified set.

    An empty set means any tutor may teach the course. An unassigned tutor
    is never a qualification failure.
    """
    if tutor_id is None or not course.qualified_tutors:
        return True
    return tutor_id in course.qualified_tutors


def has_sufficient_capacity(course: Course, location: Optional[Location]) -> bool:
    """Unset capacity or unset student count imposes no constraint."""
    if location is None or location.capacity is None or course.student_count is None:
        return True
    return course.student_count <= location.capacity


@dataclass
class QualificationIndex:
    """(tutor_id, course_id) qualification pairs with lookups in both directions."""
    pairs: frozenset[tuple[str, str]] = field(default_factory=frozenset)
    unrestricted: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_planner_data(cls, data: PlannerData) -> QualificationIndex:
        pairs = frozenset(
            (tutor_id, course.id)
            for course in data.courses
            for tutor_id in course.qualified_tutors
        )
        unrestricted = frozenset(c.id for c in data.courses if not c.qualified_tutors)
        return cls(pairs=pairs, unrestricted=unrestricted)

    def tutors_for_course(self, course_id: str) -> set[str]:
        """Explicitly qualified tutors; empty for unrestricted courses."""
        return {t for t, c in self.pairs if c == course_id}

    def courses_for_tutor(self, tutor_id: str, include_unrestricted: bool = False) -> set[str]:
        """Courses naming the tutor, optionally plus courses open to anyone."""
        courses = {c for t, c in self.pairs if t == tutor_id}
        if include_unrestricted:
            courses |= self.unrestricted
        return courses

    def is_qualified(self, tutor_id: str, course_id: str) -> bool:
        return course_id in self.unrestricted or (tutor_id, course_id) in self.pairs
