"""Load and normalize planner snapshots from JSON files."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from .models import Location, PlannerData

logger = logging.getLogger(__name__)

# Mapping fields whose keys are identifiers or day indices, not field names
_VERBATIM_KEY_FIELDS = frozenset({"travel_times", "recurring_availability"})

_ENTITY_COLLECTIONS = ("tutors", "locations", "courses", "unavailable_dates")


class DataValidationError(Exception):
    """Raised when planner data fails validation."""
    pass


def load_planner_data(path: Union[str, Path]) -> PlannerData:
    """
    Load a planner snapshot from a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        Normalized, validated PlannerData

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't valid JSON
        DataValidationError: If the data fails validation
    """
    path = Path(path)

    with open(path) as f:
        data = json.load(f)

    return parse_planner_data(data)


def parse_planner_data(raw: dict) -> PlannerData:
    """
    Build a PlannerData snapshot from a decoded JSON document.

    Accepts the camelCase shape written by the front end as well as
    snake_case, tolerating legacy records that predate newer fields.

    Raises:
        DataValidationError: If the data fails validation
    """
    if not isinstance(raw, dict):
        raise DataValidationError(f"Expected a JSON object, got {type(raw).__name__}")

    data = _convert_keys_to_snake_case(raw)

    for collection in _ENTITY_COLLECTIONS:
        items = data.get(collection)
        if items is None:
            data[collection] = []
        elif not isinstance(items, list):
            raise DataValidationError(f"Field '{collection}' must be a list")
        else:
            data[collection] = [_drop_nulls(item) for item in items]

    try:
        planner = PlannerData.model_validate(data)
    except ValidationError as e:
        raise DataValidationError(str(e)) from e

    return normalize_planner_data(planner)


def normalize_planner_data(data: PlannerData) -> PlannerData:
    """
    Apply the corrections the front end performs on save.

    - Missing reverse travel times filled in
    - Legacy tutor.can_teach entries folded into course.qualified_tutors

    Returns a new snapshot; the input is left untouched.
    """
    updates: dict[str, Any] = {
        "locations": fill_reverse_travel_times(data.locations),
        "courses": _fold_can_teach(data),
    }

    return data.model_copy(update=updates)


def fill_reverse_travel_times(locations: list[Location]) -> list[Location]:
    """
    Seed unset B->A travel times from A->B.

    Existing values are never overwritten, so asymmetric entries that were
    set explicitly survive.
    """
    filled: dict[str, dict[str, int]] = {loc.id: dict(loc.travel_times) for loc in locations}

    for loc in locations:
        for other_id, minutes in loc.travel_times.items():
            if not minutes or other_id not in filled or other_id == loc.id:
                continue
            if not filled[other_id].get(loc.id):
                logger.debug("Filling travel time %s -> %s = %d", other_id, loc.id, minutes)
                filled[other_id][loc.id] = minutes

    return [loc.model_copy(update={"travel_times": filled[loc.id]}) for loc in locations]


def _fold_can_teach(data: PlannerData) -> list:
    """Merge each tutor's can_teach list into the referenced courses."""
    extra: dict[str, list[str]] = {}
    for tutor in data.tutors:
        for course_id in tutor.can_teach:
            extra.setdefault(course_id, []).append(tutor.id)

    courses = []
    for course in data.courses:
        missing = [t for t in extra.get(course.id, []) if t not in course.qualified_tutors]
        if missing:
            logger.warning(
                "Course %s: adding tutors %s to qualified_tutors from tutor records",
                course.id, ", ".join(missing),
            )
            course = course.model_copy(
                update={"qualified_tutors": course.qualified_tutors + missing}
            )
        courses.append(course)

    known = {c.id for c in data.courses}
    for course_id in extra:
        if course_id not in known:
            logger.warning("Tutor qualification references unknown course: %s", course_id)

    return courses


def _drop_nulls(item: Any) -> Any:
    """Remove null-valued keys so model defaults apply."""
    if isinstance(item, dict):
        return {k: v for k, v in item.items() if v is not None}
    return item


def _convert_keys_to_snake_case(obj: Any, verbatim: bool = False) -> Any:
    """Recursively convert dictionary keys from camelCase to snake_case."""

    def to_snake_case(name: str) -> str:
        name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
        name = re.sub(r'([a-z\d])([A-Z])', r'\1_\2', name)
        return name.lower()

    if isinstance(obj, dict):
        if verbatim:
            return {k: _convert_keys_to_snake_case(v) for k, v in obj.items()}
        converted = {}
        for k, v in obj.items():
            key = to_snake_case(k)
            converted[key] = _convert_keys_to_snake_case(v, verbatim=key in _VERBATIM_KEY_FIELDS)
        return converted
    elif isinstance(obj, list):
        return [_convert_keys_to_snake_case(item) for item in obj]
    else:
        return obj
