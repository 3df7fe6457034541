"""Tests for the combined save-time verdict."""

from __future__ import annotations

from datetime import date

import pytest

from planner.data.models import Course, Location, PlannerData, Tutor, UnavailableDate
from planner.engine.evaluation import evaluate_all_courses, evaluate_course


@pytest.fixture
def data() -> PlannerData:
    """Tutor A works Monday mornings only; two locations 30 minutes apart."""
    return PlannerData(
        tutors=[
            Tutor(id="A", name="Alice", recurring_availability={1: ["morning"]}),
            Tutor(id="B", name="Bob"),
        ],
        locations=[
            Location(id="north", name="North", capacity=10, travel_times={"south": 30}),
            Location(id="south", name="South", travel_times={"north": 30}),
        ],
        courses=[
            Course(id="x", name="X", tutor_id="A", location_id="north", days_of_week=[1],
                   start_time="09:00", end_time="11:00", start_week=1, duration=4),
        ],
        unavailable_dates=[
            UnavailableDate(id="u1", type="single", date=date(2024, 9, 4), reason="Inset day"),
        ],
        week1_start_date=date(2024, 9, 2),
    )


def candidate(**overrides) -> Course:
    fields = dict(
        id="y",
        name="Y",
        tutor_id="B",
        location_id="south",
        days_of_week=[1],
        start_time="13:00",
        end_time="14:00",
        start_week=1,
        duration=4,
    )
    fields.update(overrides)
    return Course(**fields)


class TestEvaluateCourse:
    """Tests for individual verdicts."""

    def test_clean_course(self, data):
        result = evaluate_course(data, candidate())
        assert result.is_clean
        assert result.can_save
        assert result.warnings == []
        assert result.errors == []

    def test_overlapping_course_for_same_tutor(self, data):
        result = evaluate_course(data, candidate(tutor_id="A", start_time="10:00", end_time="11:00"))
        assert result.tutor_available
        assert len(result.conflicts) == 1
        assert result.conflicts[0].conflicting_course.id == "x"
        assert result.travel_conflicts == []
        # Double-bookings are advisory
        assert result.can_save
        assert not result.is_clean
        assert any("double-booked" in w for w in result.warnings)

    def test_tutor_unavailable_is_warning(self, data):
        result = evaluate_course(data, candidate(tutor_id="A", days_of_week=[1, 2],
                                                 start_time="12:30", end_time="13:30"))
        assert result.tutor_unavailable_days == [1, 2]
        assert not result.tutor_available
        assert result.can_save
        assert "Alice is not marked as available on Monday, Tuesday during 12:30-13:30" in result.warnings

    def test_unknown_tutor_is_unavailable(self, data):
        result = evaluate_course(data, candidate(tutor_id="deleted"))
        assert not result.tutor_available
        assert "Unknown is not marked as available" in result.warnings[0]

    def test_unassigned_resources_skip_checks(self, data):
        result = evaluate_course(data, candidate(tutor_id=None, location_id=None))
        assert result.tutor_available
        assert result.location_available
        assert result.is_clean

    def test_unqualified_tutor(self, data):
        result = evaluate_course(data, candidate(qualified_tutors=["A"]))
        assert result.qualified is False
        assert result.can_save
        assert 'Bob is not qualified to teach "Y"' in result.warnings

    def test_capacity_exceeded(self, data):
        result = evaluate_course(data, candidate(location_id="north", student_count=12))
        assert result.capacity_ok is False
        assert "12 students exceed the capacity of North (10)" in result.warnings

    def test_travel_conflict_blocks(self, data):
        result = evaluate_course(data, candidate(tutor_id="A", start_time="11:30", end_time="12:00"))
        assert len(result.travel_conflicts) == 1
        assert result.travel_conflicts[0].available_minutes == 30
        assert result.travel_conflicts[0].required_minutes == 45
        assert result.conflicts == []
        assert not result.can_save
        assert len(result.errors) == 1

    def test_blackout_blocks(self, data):
        result = evaluate_course(data, candidate(days_of_week=[3]))
        assert len(result.blackout_hits) == 1
        assert not result.can_save
        assert result.errors == ["Week 1 Wednesday falls on unavailable date 2024-09-04 (Inset day)"]

    def test_evaluation_of_stored_course_skips_itself(self, data):
        result = evaluate_course(data, data.get_course("x"))
        assert result.conflicts == []
        assert result.is_clean

    def test_to_dict(self, data):
        result = evaluate_course(data, candidate(days_of_week=[3])).to_dict()
        assert result["courseId"] == "y"
        assert result["canSave"] is False
        assert result["blackoutHits"][0]["date"] == "2024-09-04"


class TestEvaluateAllCourses:
    def test_one_result_per_course(self, data):
        data = data.model_copy(update={"courses": data.courses + [candidate()]})
        results = evaluate_all_courses(data)
        assert [r.course.id for r in results] == ["x", "y"]
        assert all(r.can_save for r in results)


class TestNonMondayAnchor:
    """Occurrence dates follow the Monday of the configured week 1."""

    @pytest.fixture
    def wednesday_anchored(self) -> PlannerData:
        return PlannerData(
            unavailable_dates=[
                UnavailableDate(id="xmas", type="single", date=date(2024, 12, 25), reason="Christmas"),
            ],
            week1_start_date=date(2024, 12, 18),
        )

    def test_monday_course_not_blocked_by_wednesday(self, wednesday_anchored):
        course = candidate(tutor_id=None, location_id=None, days_of_week=[1], start_week=2, duration=1)
        result = evaluate_course(wednesday_anchored, course)
        assert result.blackout_hits == []
        assert result.can_save

    def test_wednesday_course_blocked(self, wednesday_anchored):
        course = candidate(tutor_id=None, location_id=None, days_of_week=[3], start_week=2, duration=1)
        hits = evaluate_course(wednesday_anchored, course).blackout_hits
        assert [(h.date, h.week, h.day) for h in hits] == [(date(2024, 12, 25), 2, 3)]
