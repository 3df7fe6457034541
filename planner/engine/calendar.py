"""
Week-number and calendar-date arithmetic.

All dates derive from a single anchor: the Monday of week 1. Weeks are
Monday-aligned, so within a week the offset of a day index is
Monday=0 ... Sunday=6.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Iterator, Optional, Union

from planner.data.models import PLANNING_WEEKS

if TYPE_CHECKING:
    from planner.data.models import Course

DAYS_PER_WEEK = 7


def get_week_start_date(week_number: int, week1_start: Optional[date]) -> Optional[date]:
    """
    Monday of the given planning week.

    Example:
        >>> get_week_start_date(3, date(2024, 9, 2))
        datetime.date(2024, 9, 16)
    """
    if week1_start is None:
        return None
    return week1_start + timedelta(days=(week_number - 1) * DAYS_PER_WEEK)


def get_current_week(
    week1_start: Optional[date],
    today: Optional[date] = None,
    planning_weeks: int = PLANNING_WEEKS,
) -> Optional[int]:
    """
    Planning week containing ``today``.

    Returns None when no anchor is configured or the date falls outside
    weeks 1..planning_weeks.
    """
    if week1_start is None:
        return None
    if today is None:
        today = date.today()
    elif isinstance(today, datetime):
        today = today.date()

    week_number = (today - week1_start).days // DAYS_PER_WEEK + 1
    return week_number if 1 <= week_number <= planning_weeks else None


def align_week1_start(anchor: date) -> tuple[date, bool]:
    """
    Move an anchor back to the Monday of its week.

    Returns:
        (monday, corrected) where corrected is True if the anchor moved
    """
    offset = anchor.weekday()  # Monday=0
    if offset == 0:
        return anchor, False
    return anchor - timedelta(days=offset), True


def day_offset(day_of_week: int) -> int:
    """Offset of a Sunday=0 day index from the Monday that starts its week."""
    return (day_of_week - 1) % DAYS_PER_WEEK


def occurrence_date(week_number: int, day_of_week: int, week1_start: date) -> date:
    """Calendar date of one occurrence."""
    return get_week_start_date(week_number, week1_start) + timedelta(days=day_offset(day_of_week))


def course_occurrence_dates(course: Course, week1_start: Optional[date]) -> Iterator[tuple[int, int, date]]:
    """
    Yield (week, day, date) for every occurrence of a course.

    Yields nothing when no anchor is configured. An anchor that is not a
    Monday is treated as the Monday of its week.
    """
    if week1_start is None:
        return
    week1_start, _ = align_week1_start(week1_start)
    for week in range(course.start_week, course.end_week + 1):
        for day in course.days_of_week:
            yield week, day, occurrence_date(week, day, week1_start)


def parse_calendar_date(value: Union[date, datetime, str]) -> date:
    """Coerce a date, datetime or ISO string to a date, ignoring time of day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])
