"""
Recurring availability checks for tutors and locations.

A resource lists, per day, the named periods it is available in. A session
is available when it fits entirely inside one available period, or inside
a run of consecutive available periods (e.g. morning+afternoon allows
11:00-13:00). With no recurring availability configured at all the
resource is treated as always available.

Custom (per-date) availability is carried on the models but not consulted
here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional, Sequence, Union

from planner.data.models import DEFAULT_PERIODS, time_to_minutes

if TYPE_CHECKING:
    from planner.data.models import Location, PeriodWindow, PlannerData, Tutor

logger = logging.getLogger(__name__)

Resource = Union["Tutor", "Location"]


def available_spans(
    day_periods: Iterable[str],
    periods: Sequence[PeriodWindow] = DEFAULT_PERIODS,
) -> list[tuple[int, int]]:
    """
    Maximal runs of consecutive available periods as minute ranges.

    Adjacency follows the order of ``periods``; unknown period names are
    ignored.

    Example:
        >>> available_spans(["morning", "afternoon"])
        [(360, 1020)]
        >>> available_spans(["morning", "evening"])
        [(360, 720), (1020, 1320)]
    """
    wanted = set(day_periods)
    spans: list[tuple[int, int]] = []
    run: Optional[list[int]] = None

    for period in periods:
        if period.name in wanted:
            if run is None:
                run = [period.start_minutes, period.end_minutes]
            else:
                run[1] = period.end_minutes
        elif run is not None:
            spans.append((run[0], run[1]))
            run = None

    if run is not None:
        spans.append((run[0], run[1]))

    return spans


def is_available(
    resource: Optional[Resource],
    day_of_week: int,
    start_time: str,
    end_time: str,
    periods: Sequence[PeriodWindow] = DEFAULT_PERIODS,
) -> bool:
    """
    Check whether a resource is available for [start_time, end_time) on a day.

    Args:
        resource: Tutor or Location, None if the reference is unknown
        day_of_week: Day index (0=Sunday)
        start_time: 'HH:MM'
        end_time: 'HH:MM'
        periods: Ordered period table

    Returns:
        False for an unknown resource or a day with nothing available,
        True when no recurring availability is configured, otherwise
        whether the interval fits in an available period or run.
    """
    if resource is None:
        return False

    if not resource.recurring_availability:
        return True

    day_periods = resource.recurring_availability.get(day_of_week)
    if not day_periods:
        return False

    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)

    by_name = {p.name: p for p in periods}
    for name in day_periods:
        period = by_name.get(name)
        if period and period.start_minutes <= start and end <= period.end_minutes:
            return True

    for span_start, span_end in available_spans(day_periods, periods):
        if span_start <= start and end <= span_end:
            return True

    logger.debug(
        "%s unavailable on day %d %s-%s (has %s)",
        resource.id, day_of_week, start_time, end_time, day_periods,
    )
    return False


def is_tutor_available(
    data: PlannerData,
    tutor_id: Optional[str],
    day_of_week: int,
    start_time: str,
    end_time: str,
) -> bool:
    """Availability of a tutor looked up in the snapshot."""
    return is_available(
        data.get_tutor(tutor_id), day_of_week, start_time, end_time, data.config.periods
    )


def is_location_available(
    data: PlannerData,
    location_id: Optional[str],
    day_of_week: int,
    start_time: str,
    end_time: str,
) -> bool:
    """Availability of a location looked up in the snapshot."""
    return is_available(
        data.get_location(location_id), day_of_week, start_time, end_time, data.config.periods
    )


def unavailable_days(
    resource: Optional[Resource],
    days_of_week: Iterable[int],
    start_time: str,
    end_time: str,
    periods: Sequence[PeriodWindow] = DEFAULT_PERIODS,
) -> list[int]:
    """Days from ``days_of_week`` on which the resource is not available."""
    return [
        day for day in days_of_week
        if not is_available(resource, day, start_time, end_time, periods)
    ]
