"""Tests for travel-time conflicts between locations."""

from __future__ import annotations

from typing import Optional

import pytest

from planner.data.models import Course, Location, PlannerConfig, PlannerData, Tutor
from planner.engine.conflicts import ConflictKind
from planner.engine.travel import check_tutor_travel_conflicts


def make_course(
    course_id: str,
    location_id: Optional[str],
    start: str,
    end: str,
    tutor_id: Optional[str] = "t1",
    days: list[int] = (1,),
    start_week: int = 1,
    duration: int = 4,
) -> Course:
    return Course(
        id=course_id,
        tutor_id=tutor_id,
        location_id=location_id,
        days_of_week=list(days),
        start_time=start,
        end_time=end,
        start_week=start_week,
        duration=duration,
    )


def make_data(*courses: Course, **config) -> PlannerData:
    return PlannerData(
        config=PlannerConfig(**config),
        tutors=[Tutor(id="t1", name="Ada")],
        locations=[
            Location(id="locA", name="North", travel_times={"locB": 30}),
            Location(id="locB", name="South"),
            Location(id="locC", name="East"),
        ],
        courses=list(courses),
    )


@pytest.fixture
def morning_at_a() -> Course:
    return make_course("cand", "locA", "12:00", "14:00")


class TestTravelConflicts:
    """Tests for the gap-versus-travel check."""

    def test_gap_one_minute_short(self, morning_at_a):
        data = make_data(make_course("other", "locB", "14:44", "16:00"))
        conflicts = check_tutor_travel_conflicts(data, morning_at_a)

        assert len(conflicts) == 1
        record = conflicts[0]
        assert record.kind == ConflictKind.TRAVEL
        assert record.type == "travel"
        assert record.is_blocking
        assert record.required_minutes == 45
        assert record.available_minutes == 44
        assert record.day == 1
        assert "Monday" in record.message
        assert "North" in record.message and "South" in record.message

    def test_exact_gap_is_enough(self, morning_at_a):
        data = make_data(make_course("other", "locB", "14:45", "16:00"))
        assert check_tutor_travel_conflicts(data, morning_at_a) == []

    def test_other_course_first(self):
        data = make_data(make_course("other", "locB", "08:00", "11:50"))
        candidate = make_course("cand", "locA", "12:00", "13:00")
        conflicts = check_tutor_travel_conflicts(data, candidate)
        assert len(conflicts) == 1
        assert conflicts[0].available_minutes == 10
        assert "ends 11:50" in conflicts[0].message

    def test_same_location_skipped(self, morning_at_a):
        data = make_data(make_course("other", "locA", "14:00", "15:00"))
        assert check_tutor_travel_conflicts(data, morning_at_a) == []

    def test_no_travel_time_configured(self, morning_at_a):
        data = make_data(make_course("other", "locC", "14:00", "15:00"))
        assert check_tutor_travel_conflicts(data, morning_at_a) == []

    def test_travel_read_from_candidate_location(self):
        # locB has no entry for locA unless reverse-filled at load time
        data = make_data(make_course("other", "locA", "12:00", "14:00"))
        candidate = make_course("cand", "locB", "14:10", "15:00")
        assert check_tutor_travel_conflicts(data, candidate) == []

    def test_candidate_without_tutor(self, morning_at_a):
        data = make_data(make_course("other", "locB", "14:05", "15:00"))
        candidate = morning_at_a.model_copy(update={"tutor_id": None})
        assert check_tutor_travel_conflicts(data, candidate) == []

    def test_candidate_without_location(self):
        data = make_data(make_course("other", "locB", "14:05", "15:00"))
        candidate = make_course("cand", None, "12:00", "14:00")
        assert check_tutor_travel_conflicts(data, candidate) == []

    def test_other_tutor_ignored(self, morning_at_a):
        data = make_data(make_course("other", "locB", "14:05", "15:00", tutor_id="t2"))
        assert check_tutor_travel_conflicts(data, morning_at_a) == []

    def test_different_day_ignored(self, morning_at_a):
        data = make_data(make_course("other", "locB", "14:05", "15:00", days=[2]))
        assert check_tutor_travel_conflicts(data, morning_at_a) == []

    def test_disjoint_weeks_ignored(self, morning_at_a):
        data = make_data(make_course("other", "locB", "14:05", "15:00", start_week=5))
        assert check_tutor_travel_conflicts(data, morning_at_a) == []

    def test_overlapping_times_left_to_double_booking(self, morning_at_a):
        data = make_data(make_course("other", "locB", "13:00", "15:00"))
        assert check_tutor_travel_conflicts(data, morning_at_a) == []

    def test_one_record_per_shared_day(self):
        data = make_data(make_course("other", "locB", "14:05", "15:00", days=[1, 3, 5]))
        candidate = make_course("cand", "locA", "12:00", "14:00", days=[1, 3])
        conflicts = check_tutor_travel_conflicts(data, candidate)
        assert [c.day for c in conflicts] == [1, 3]

    def test_configurable_buffer(self, morning_at_a):
        data = make_data(make_course("other", "locB", "14:35", "16:00"), travel_buffer_minutes=5)
        assert check_tutor_travel_conflicts(data, morning_at_a) == []

        data = make_data(make_course("other", "locB", "14:34", "16:00"), travel_buffer_minutes=5)
        assert check_tutor_travel_conflicts(data, morning_at_a)[0].required_minutes == 35

    def test_to_dict_carries_minutes(self, morning_at_a):
        data = make_data(make_course("other", "locB", "14:30", "16:00"))
        result = check_tutor_travel_conflicts(data, morning_at_a)[0].to_dict()
        assert result["type"] == "travel"
        assert result["requiredMinutes"] == 45
        assert result["availableMinutes"] == 30
