"""
Travel-time conflicts for a tutor moving between locations.

A tutor finishing at location A and starting at location B on the same
day needs at least travel_times[A][B] plus the configured buffer between
the two sessions. Pairs at the same location, or with no travel time
configured, are never reported.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from planner.data.models import day_name

from .conflicts import ConflictKind, ConflictRecord
from .overlap import weeks_overlap

if TYPE_CHECKING:
    from planner.data.models import Course, PlannerData

logger = logging.getLogger(__name__)


def check_tutor_travel_conflicts(data: PlannerData, candidate: Course) -> list[ConflictRecord]:
    """
    Travel-time violations between a candidate and the tutor's other courses.

    One record is produced per shared day on which the gap is too short.
    Travel time is read from the candidate's location.

    Args:
        data: Snapshot with courses, locations and config
        candidate: Course being checked

    Returns:
        Conflict records of kind TRAVEL
    """
    if candidate.tutor_id is None or candidate.location_id is None:
        return []

    candidate_location = data.get_location(candidate.location_id)
    buffer = data.config.travel_buffer_minutes
    conflicts: list[ConflictRecord] = []

    others = [
        c for c in data.courses
        if c.id != candidate.id
        and c.tutor_id == candidate.tutor_id
        and c.location_id is not None
    ]

    for day in candidate.days_of_week:
        for other in others:
            if day not in other.days_of_week:
                continue
            if not weeks_overlap(candidate.start_week, candidate.duration, other.start_week, other.duration):
                continue
            if other.location_id == candidate.location_id:
                continue

            travel = candidate_location.travel_minutes_to(other.location_id) if candidate_location else 0
            if not travel:
                continue

            required = travel + buffer

            if candidate.start_minutes >= other.end_minutes:
                gap = candidate.start_minutes - other.end_minutes
                first, second = other, candidate
            elif other.start_minutes >= candidate.end_minutes:
                gap = other.start_minutes - candidate.end_minutes
                first, second = candidate, other
            else:
                # Overlapping sessions are a double-booking, not a travel problem
                continue

            if gap < required:
                conflicts.append(ConflictRecord(
                    kind=ConflictKind.TRAVEL,
                    message=(
                        f'Tutor {data.tutor_name(candidate.tutor_id)} cannot travel from '
                        f'{data.location_name(first.location_id)} ("{first.name or first.id}", ends {first.end_time}) '
                        f'to {data.location_name(second.location_id)} ("{second.name or second.id}", starts {second.start_time}) '
                        f'on {day_name(day)}: needs {required} min '
                        f'({travel} travel + {buffer} buffer), has {gap} min'
                    ),
                    course=candidate,
                    conflicting_course=other,
                    resource_id=candidate.tutor_id,
                    day=day,
                    required_minutes=required,
                    available_minutes=gap,
                ))

    logger.debug("Course %s: %d travel conflicts", candidate.id, len(conflicts))
    return conflicts
