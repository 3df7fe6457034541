"""Calendar blackout dates that veto scheduling."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Iterable, Optional, Union

from .calendar import course_occurrence_dates, parse_calendar_date

if TYPE_CHECKING:
    from planner.data.models import Course, UnavailableDate


@dataclass
class BlackoutHit:
    """An occurrence of a course that falls on an unavailable date."""
    date: date
    week: int
    day: int
    reason: str

    @property
    def is_blocking(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "week": self.week,
            "day": self.day,
            "reason": self.reason,
        }


def find_unavailable_entry(
    day: Union[date, datetime, str],
    unavailable_dates: Iterable[UnavailableDate],
) -> Optional[UnavailableDate]:
    """First blackout entry covering the date, if any."""
    target = parse_calendar_date(day)
    return next((entry for entry in unavailable_dates if entry.covers(target)), None)


def is_date_unavailable(
    day: Union[date, datetime, str],
    unavailable_dates: Iterable[UnavailableDate],
) -> bool:
    """
    Check a calendar date against single and range blackouts.

    Ranges are inclusive at both ends; time of day is ignored.
    """
    return find_unavailable_entry(day, unavailable_dates) is not None


def find_blackout_hits(
    course: Course,
    week1_start: Optional[date],
    unavailable_dates: Iterable[UnavailableDate],
) -> list[BlackoutHit]:
    """
    Every occurrence of a course that lands on a blackout date.

    Without a week 1 anchor no dates can be derived, so nothing is reported.
    """
    entries = list(unavailable_dates)
    if not entries:
        return []

    hits: list[BlackoutHit] = []
    for week, day, when in course_occurrence_dates(course, week1_start):
        entry = find_unavailable_entry(when, entries)
        if entry is not None:
            hits.append(BlackoutHit(date=when, week=week, day=day, reason=entry.reason))
    return hits
