"""Tests for tutor and location double-booking detection."""

from __future__ import annotations

from typing import Optional

import pytest

from planner.data.models import Course, Location, PlannerData, Tutor
from planner.engine.conflicts import (
    ConflictKind,
    check_course_conflicts,
    conflicts_for_course,
    detect_all_conflicts,
)


def make_course(
    course_id: str,
    tutor_id: Optional[str] = None,
    location_id: Optional[str] = None,
    days: list[int] = (1,),
    start: str = "09:00",
    end: str = "11:00",
    start_week: int = 1,
    duration: int = 4,
) -> Course:
    return Course(
        id=course_id,
        name=course_id.upper(),
        tutor_id=tutor_id,
        location_id=location_id,
        days_of_week=list(days),
        start_time=start,
        end_time=end,
        start_week=start_week,
        duration=duration,
    )


def make_data(*courses: Course) -> PlannerData:
    return PlannerData(
        tutors=[
            Tutor(id="A", name="Alice", recurring_availability={1: ["morning"]}),
            Tutor(id="B", name="Bob"),
        ],
        locations=[Location(id="hall", name="Main Hall"), Location(id="lab", name="Lab")],
        courses=list(courses),
    )


class TestDetectAllConflicts:
    """Tests for whole-snapshot conflict detection."""

    def test_tutor_double_booking(self):
        data = make_data(
            make_course("x", tutor_id="A", start="09:00", end="11:00"),
            make_course("y", tutor_id="A", start="10:00", end="11:00"),
        )
        conflicts = detect_all_conflicts(data)

        assert len(conflicts) == 1
        record = conflicts[0]
        assert record.kind == ConflictKind.TUTOR
        assert record.type == "error"
        assert not record.is_blocking
        assert record.resource_id == "A"
        assert record.message == 'Tutor Alice is double-booked: "X" and "Y"'

    def test_location_double_booking(self):
        data = make_data(
            make_course("x", location_id="hall"),
            make_course("y", location_id="hall"),
        )
        conflicts = detect_all_conflicts(data)

        assert [c.kind for c in conflicts] == [ConflictKind.LOCATION]
        assert conflicts[0].message == 'Location Main Hall is double-booked: "X" and "Y"'

    def test_tutor_and_location_give_two_records(self):
        data = make_data(
            make_course("x", tutor_id="A", location_id="hall"),
            make_course("y", tutor_id="A", location_id="hall"),
        )
        kinds = [c.kind for c in detect_all_conflicts(data)]
        assert kinds == [ConflictKind.TUTOR, ConflictKind.LOCATION]

    def test_three_way_overlap_not_deduplicated(self):
        data = make_data(
            make_course("x", tutor_id="A"),
            make_course("y", tutor_id="A"),
            make_course("z", tutor_id="A"),
        )
        pairs = {(c.course.id, c.conflicting_course.id) for c in detect_all_conflicts(data)}
        assert pairs == {("x", "y"), ("x", "z"), ("y", "z")}

    def test_unassigned_resources_never_conflict(self):
        data = make_data(make_course("x"), make_course("y"))
        assert detect_all_conflicts(data) == []

    def test_different_tutors(self):
        data = make_data(make_course("x", tutor_id="A"), make_course("y", tutor_id="B"))
        assert detect_all_conflicts(data) == []

    @pytest.mark.parametrize("other", [
        {"days": [2]},
        {"start_week": 5},
        {"start": "11:00", "end": "12:00"},
    ])
    def test_no_overlap_no_conflict(self, other):
        data = make_data(make_course("x", tutor_id="A"), make_course("y", tutor_id="A", **other))
        assert detect_all_conflicts(data) == []

    def test_to_dict(self):
        data = make_data(make_course("x", tutor_id="A"), make_course("y", tutor_id="A"))
        result = detect_all_conflicts(data)[0].to_dict()
        assert result["type"] == "error"
        assert result["kind"] == "tutor"
        assert result["courseId"] == "x"
        assert result["conflictingCourseId"] == "y"
        assert "requiredMinutes" not in result
        assert set(result) == {"type", "kind", "message", "courseId", "conflictingCourseId", "resourceId"}


class TestCheckCourseConflicts:
    """Tests for checking one candidate against the snapshot."""

    def test_candidate_not_in_snapshot(self):
        data = make_data(make_course("x", tutor_id="A"))
        candidate = make_course("new", tutor_id="A", start="10:00", end="12:00")
        conflicts = check_course_conflicts(data, candidate)
        assert len(conflicts) == 1
        assert conflicts[0].course.id == "new"
        assert conflicts[0].conflicting_course.id == "x"

    def test_course_never_conflicts_with_itself(self):
        existing = make_course("x", tutor_id="A", location_id="hall")
        data = make_data(existing)
        assert check_course_conflicts(data, existing) == []

    def test_edited_course_replaces_stored_version(self):
        data = make_data(make_course("x", tutor_id="A"), make_course("y", tutor_id="A", days=[2]))
        edited = make_course("x", tutor_id="A", days=[2])
        conflicts = check_course_conflicts(data, edited)
        assert [c.conflicting_course.id for c in conflicts] == ["y"]

    def test_unknown_tutor_name(self):
        data = make_data(make_course("x", tutor_id="ghost"))
        conflicts = check_course_conflicts(data, make_course("y", tutor_id="ghost"))
        assert conflicts[0].message.startswith("Tutor Unknown is double-booked")

    def test_travel_excluded_on_request(self):
        data = PlannerData(
            tutors=[Tutor(id="A")],
            locations=[Location(id="a", travel_times={"b": 30}), Location(id="b")],
            courses=[make_course("x", tutor_id="A", location_id="b", start="11:00", end="12:00")],
        )
        candidate = make_course("y", tutor_id="A", location_id="a", start="09:00", end="11:00")
        assert [c.kind for c in check_course_conflicts(data, candidate)] == [ConflictKind.TRAVEL]
        assert check_course_conflicts(data, candidate, include_travel=False) == []


class TestConflictsForCourse:
    def test_filters_either_side(self):
        data = make_data(
            make_course("x", tutor_id="A"),
            make_course("y", tutor_id="A"),
            make_course("z", tutor_id="B", days=[3]),
            make_course("w", tutor_id="B", days=[3]),
        )
        conflicts = detect_all_conflicts(data)
        assert len(conflicts_for_course(conflicts, "y")) == 1
        assert len(conflicts_for_course(conflicts, "w")) == 1
        assert conflicts_for_course(conflicts, "missing") == []
