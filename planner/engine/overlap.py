"""
Day/week/time overlap between recurring sessions.

Two sessions overlap only if they share a day of the week, their week
ranges intersect (closed intervals) and their clock ranges intersect
(half-open intervals, so back-to-back sessions do not overlap).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from planner.data.models import time_to_minutes

if TYPE_CHECKING:
    from planner.data.models import Course


def days_overlap(a_days: Iterable[int], b_days: Iterable[int]) -> bool:
    """True if the two day sets share at least one day."""
    return not set(a_days).isdisjoint(b_days)


def weeks_overlap(a_start: int, a_duration: int, b_start: int, b_duration: int) -> bool:
    """True if [a_start, a_end] and [b_start, b_end] intersect."""
    a_end = a_start + a_duration - 1
    b_end = b_start + b_duration - 1
    return not (a_end < b_start or b_end < a_start)


def times_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """True if [a_start, a_end) and [b_start, b_end) intersect."""
    a_start_m, a_end_m = time_to_minutes(a_start), time_to_minutes(a_end)
    b_start_m, b_end_m = time_to_minutes(b_start), time_to_minutes(b_end)
    return not (a_end_m <= b_start_m or b_end_m <= a_start_m)


def sessions_overlap(a: Course, b: Course) -> bool:
    """
    Check whether two sessions occupy a common day, week and time.

    Accepts any objects with days_of_week, start_week, duration,
    start_time and end_time attributes.
    """
    if not days_overlap(a.days_of_week, b.days_of_week):
        return False

    if not weeks_overlap(a.start_week, a.duration, b.start_week, b.duration):
        return False

    return times_overlap(a.start_time, a.end_time, b.start_time, b.end_time)
