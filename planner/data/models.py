"""
Pydantic models for the course planner data model.

Mirrors the snapshot persisted by the planner front end.

Time conventions:
- Clock times are 'HH:MM' strings (24-hour), converted to minutes from
  midnight (0-1439) for comparisons
- Days are 0-6 (0=Sunday, 6=Saturday); courses normally run on 1-5
- Weeks are 1-based within a fixed planning horizon (default 40)

Example times:
- 9:00 AM = 540
- 12:30 PM = 750
- 3:15 PM = 915
"""

from __future__ import annotations

import datetime as dt
import logging
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Constants and Enums
# =============================================================================

class PeriodName(str, Enum):
    """Named coarse period used for recurring availability."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class BlackoutType(str, Enum):
    """Shape of an unavailable-date entry."""
    SINGLE = "single"
    RANGE = "range"


PLANNING_WEEKS = 40
MAX_PLANNING_WEEKS = 52
TRAVEL_BUFFER_MINUTES = 15
WEEKDAYS = frozenset({1, 2, 3, 4, 5})

# Values the front end stores for "no tutor" / "no location"
UNASSIGNED_SENTINELS = frozenset({"none", ""})

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# Type aliases for documentation
ClockTime = Annotated[str, Field(pattern=r"^\d{1,2}:\d{2}$", description="Time as HH:MM")]
DayIndex = Annotated[int, Field(ge=0, le=6, description="Day of week (0=Sunday, 6=Saturday)")]
WeekNumber = Annotated[int, Field(ge=1, le=MAX_PLANNING_WEEKS, description="1-based planning week")]


# =============================================================================
# Helper Functions
# =============================================================================

def minutes_to_time(minutes: int) -> str:
    """Convert minutes from midnight to HH:MM format."""
    h, m = divmod(minutes, 60)
    return f"{h:02d}:{m:02d}"


def time_to_minutes(time_str: str) -> int:
    """Convert HH:MM format to minutes from midnight."""
    h, m = map(int, time_str.split(":"))
    return h * 60 + m


def day_name(day: int) -> str:
    """Get day name from index."""
    return DAY_NAMES[day] if 0 <= day <= 6 else f"Day {day}"


def _unassigned_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in UNASSIGNED_SENTINELS:
        return None
    return value


# =============================================================================
# Configuration Models
# =============================================================================

class PeriodWindow(BaseModel):
    """A named period of the day, e.g. morning 06:00-12:00."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1, description="Period name")
    start_time: ClockTime = Field(description="Period start")
    end_time: ClockTime = Field(description="Period end (exclusive)")

    @model_validator(mode="after")
    def validate_time_range(self) -> "PeriodWindow":
        """Ensure start time is before end time."""
        if self.start_minutes >= self.end_minutes:
            raise ValueError(
                f"start_time ({self.start_time}) must be before "
                f"end_time ({self.end_time})"
            )
        return self

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end_time)

    def __str__(self) -> str:
        return f"{self.name} ({self.start_time}-{self.end_time})"


DEFAULT_PERIODS: tuple[PeriodWindow, ...] = (
    PeriodWindow(name=PeriodName.MORNING.value, start_time="06:00", end_time="12:00"),
    PeriodWindow(name=PeriodName.AFTERNOON.value, start_time="12:00", end_time="17:00"),
    PeriodWindow(name=PeriodName.EVENING.value, start_time="17:00", end_time="22:00"),
)


class PlannerConfig(BaseModel):
    """Planner-wide configuration settings."""
    model_config = ConfigDict(extra="forbid")

    planning_weeks: int = Field(default=PLANNING_WEEKS, ge=1, le=MAX_PLANNING_WEEKS, description="Weeks in the planning horizon")
    travel_buffer_minutes: int = Field(
        default=TRAVEL_BUFFER_MINUTES, ge=0, le=240,
        description="Safety margin added to inter-location travel time",
    )
    periods: list[PeriodWindow] = Field(
        default_factory=lambda: list(DEFAULT_PERIODS),
        min_length=1,
        description="Ordered period table; list order defines adjacency",
    )

    @field_validator("periods")
    @classmethod
    def validate_period_order(cls, periods: list[PeriodWindow]) -> list[PeriodWindow]:
        """Periods must be uniquely named, increasing and non-overlapping."""
        names = [p.name for p in periods]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate period names: {names}")
        for prev, nxt in zip(periods, periods[1:]):
            if nxt.start_minutes < prev.end_minutes:
                raise ValueError(f"Period '{nxt.name}' starts before '{prev.name}' ends")
        return periods


class DisplaySettings(BaseModel):
    """Cosmetic settings carried in the snapshot."""
    model_config = ConfigDict(extra="ignore")

    funded_color: str = Field(default="#10b981", pattern=r"^#[0-9A-Fa-f]{6}$")
    non_funded_color: str = Field(default="#3b82f6", pattern=r"^#[0-9A-Fa-f]{6}$")


# =============================================================================
# Core Entity Models
# =============================================================================

class CustomAvailability(BaseModel):
    """
    One-off availability window on a specific date.

    Stored and round-tripped, but not consulted by the availability check.
    """
    model_config = ConfigDict(extra="ignore")

    date: dt.date
    start_time: ClockTime
    end_time: ClockTime


class Tutor(BaseModel):
    """Tutor entity."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(default="", description="Full name")
    email: Optional[str] = Field(default=None, description="Email address")
    recurring_availability: dict[DayIndex, list[str]] = Field(
        default_factory=dict,
        description="Day index -> available period names",
    )
    custom_availability: list[CustomAvailability] = Field(default_factory=list)
    can_teach: list[str] = Field(
        default_factory=list,
        description="Legacy mirror of Course.qualified_tutors; folded into courses on load",
    )

    def __str__(self) -> str:
        return self.name or self.id


class Location(BaseModel):
    """Teaching location."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(default="", description="Location name")
    capacity: Optional[int] = Field(default=None, ge=1, description="Max students")
    facilities: Optional[str] = Field(default=None, description="Free-text facilities")
    recurring_availability: dict[DayIndex, list[str]] = Field(default_factory=dict)
    custom_availability: list[CustomAvailability] = Field(default_factory=list)
    travel_times: dict[str, int] = Field(
        default_factory=dict,
        description="Other location ID -> travel minutes",
    )

    @field_validator("capacity", mode="before")
    @classmethod
    def blank_capacity(cls, value: Any) -> Any:
        """Empty or zero capacity means 'not set'."""
        if value in ("", 0):
            return None
        return value

    def travel_minutes_to(self, location_id: str) -> int:
        """Configured travel time to another location, 0 when unknown."""
        return self.travel_times.get(location_id) or 0

    def __str__(self) -> str:
        return self.name or self.id


class Course(BaseModel):
    """
    Recurring course (session template).

    Occupies every combination of days_of_week x [start_week, end_week] at
    the same [start_time, end_time) clock range.
    """
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1, description="Unique identifier")
    name: str = Field(default="", description="Course name")
    tutor_id: Optional[str] = Field(default=None, description="Assigned tutor, None if unassigned")
    location_id: Optional[str] = Field(default=None, description="Assigned location, None if unassigned")
    days_of_week: list[DayIndex] = Field(min_length=1, description="Days the course recurs on")
    start_time: ClockTime
    end_time: ClockTime
    start_week: WeekNumber = Field(description="First week (1-based)")
    duration: int = Field(default=1, ge=1, description="Number of consecutive weeks")
    qualified_tutors: list[str] = Field(
        default_factory=list,
        description="Tutors allowed to teach; empty means unrestricted",
    )
    student_count: Optional[int] = Field(default=None, ge=0, description="Enrolled students")
    funded: bool = Field(default=False, description="Reporting only")
    color: Optional[str] = Field(default=None, description="Display colour")

    @model_validator(mode="before")
    @classmethod
    def normalize_legacy_shape(cls, data: Any) -> Any:
        """Accept the legacy single-day field and 'none' sentinels."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        legacy_day = data.pop("day_of_week", data.pop("dayOfWeek", None))
        if not data.get("days_of_week") and legacy_day is not None:
            data["days_of_week"] = [legacy_day]
        for key in ("tutor_id", "location_id"):
            if key in data:
                data[key] = _unassigned_to_none(data[key])
        if data.get("student_count") == "":
            data["student_count"] = None
        return data

    @field_validator("days_of_week")
    @classmethod
    def unique_days(cls, days: list[int]) -> list[int]:
        return sorted(set(days))

    @model_validator(mode="after")
    def validate_time_range(self) -> "Course":
        """Ensure start time is before end time."""
        if self.start_minutes >= self.end_minutes:
            raise ValueError(
                f"start_time ({self.start_time}) must be before "
                f"end_time ({self.end_time})"
            )
        return self

    @property
    def end_week(self) -> int:
        """Last week the course runs (inclusive)."""
        return self.start_week + self.duration - 1

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end_time)

    @property
    def duration_minutes(self) -> int:
        """Length of one occurrence."""
        return self.end_minutes - self.start_minutes

    def __str__(self) -> str:
        days = ", ".join(day_name(d)[:3] for d in self.days_of_week)
        return f"{self.name or self.id} ({days} {self.start_time}-{self.end_time}, wk {self.start_week}-{self.end_week})"


class UnavailableDate(BaseModel):
    """Calendar blackout: a single date or an inclusive date range."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1, description="Unique identifier")
    type: BlackoutType = Field(default=BlackoutType.SINGLE)
    date: Optional[dt.date] = Field(default=None, description="Date for single entries")
    start_date: Optional[dt.date] = Field(default=None, description="First date for range entries")
    end_date: Optional[dt.date] = Field(default=None, description="Last date for range entries")
    reason: str = Field(default="", description="Why the date is unavailable")

    @model_validator(mode="after")
    def validate_shape(self) -> "UnavailableDate":
        """Single entries need a date, ranges need ordered bounds."""
        if self.type == BlackoutType.SINGLE:
            if self.date is None:
                raise ValueError(f"Unavailable date {self.id}: single entry requires 'date'")
        else:
            if self.start_date is None or self.end_date is None:
                raise ValueError(
                    f"Unavailable date {self.id}: range entry requires 'start_date' and 'end_date'"
                )
            if self.start_date > self.end_date:
                raise ValueError(
                    f"Unavailable date {self.id}: start_date ({self.start_date}) "
                    f"is after end_date ({self.end_date})"
                )
        return self

    def covers(self, day: dt.date) -> bool:
        """Whether this entry blocks the given calendar date."""
        if self.type == BlackoutType.SINGLE:
            return day == self.date
        return self.start_date <= day <= self.end_date

    def __str__(self) -> str:
        if self.type == BlackoutType.SINGLE:
            when = self.date.isoformat()
        else:
            when = f"{self.start_date.isoformat()} to {self.end_date.isoformat()}"
        return f"{when} ({self.reason})" if self.reason else when


# =============================================================================
# Snapshot Model
# =============================================================================

class PlannerData(BaseModel):
    """
    Read-only snapshot of everything the engine evaluates.

    Lookups scan the lists on every call so a snapshot that is rebuilt
    between calls never yields stale results.
    """
    model_config = ConfigDict(extra="ignore")

    config: PlannerConfig = Field(default_factory=PlannerConfig)
    settings: DisplaySettings = Field(default_factory=DisplaySettings)

    tutors: list[Tutor] = Field(default_factory=list)
    locations: list[Location] = Field(default_factory=list)
    courses: list[Course] = Field(default_factory=list)
    unavailable_dates: list[UnavailableDate] = Field(default_factory=list)
    week1_start_date: Optional[dt.date] = Field(default=None, description="Monday of week 1")

    @model_validator(mode="after")
    def validate_no_duplicate_ids(self) -> "PlannerData":
        """Ensure no duplicate IDs within each entity type."""
        errors: list[str] = []

        def check_duplicates(items: list, entity_name: str) -> None:
            seen: set[str] = set()
            for item in items:
                if item.id in seen:
                    errors.append(f"Duplicate {entity_name} ID: '{item.id}'")
                seen.add(item.id)

        check_duplicates(self.tutors, "tutor")
        check_duplicates(self.locations, "location")
        check_duplicates(self.courses, "course")
        check_duplicates(self.unavailable_dates, "unavailable date")

        if errors:
            raise ValueError(f"Duplicate ID validation failed:\n" + "\n".join(f"  - {e}" for e in errors))

        return self

    @model_validator(mode="after")
    def validate_course_weeks(self) -> "PlannerData":
        """Courses must start inside the configured planning horizon."""
        horizon = self.config.planning_weeks
        late = [c for c in self.courses if c.start_week > horizon]
        if late:
            raise ValueError("\n".join(
                f"Course '{c.id}' starts in week {c.start_week}, beyond the {horizon}-week plan"
                for c in late
            ))
        return self

    @model_validator(mode="after")
    def align_week1_to_monday(self) -> "PlannerData":
        """Move a week 1 anchor back to the Monday of its week."""
        anchor = self.week1_start_date
        if anchor is not None and anchor.weekday() != 0:
            monday = anchor - dt.timedelta(days=anchor.weekday())
            logger.warning(
                "Week 1 start %s is not a Monday; using %s instead",
                anchor.isoformat(), monday.isoformat(),
            )
            self.week1_start_date = monday
        return self

    # -------------------------------------------------------------------------
    # Lookup Methods
    # -------------------------------------------------------------------------

    def get_tutor(self, tutor_id: Optional[str]) -> Optional[Tutor]:
        """Get tutor by ID."""
        return next((t for t in self.tutors if t.id == tutor_id), None)

    def get_location(self, location_id: Optional[str]) -> Optional[Location]:
        """Get location by ID."""
        return next((l for l in self.locations if l.id == location_id), None)

    def get_course(self, course_id: Optional[str]) -> Optional[Course]:
        """Get course by ID."""
        return next((c for c in self.courses if c.id == course_id), None)

    def tutor_name(self, tutor_id: Optional[str]) -> str:
        """Display name for a tutor reference."""
        if tutor_id is None:
            return "No tutor"
        tutor = self.get_tutor(tutor_id)
        return str(tutor) if tutor else "Unknown"

    def location_name(self, location_id: Optional[str]) -> str:
        """Display name for a location reference."""
        if location_id is None:
            return "No location"
        location = self.get_location(location_id)
        return str(location) if location else "Unknown"

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    def get_tutor_courses(self, tutor_id: str) -> list[Course]:
        """Get all courses taught by a tutor."""
        return [c for c in self.courses if c.tutor_id == tutor_id]

    def get_location_courses(self, location_id: str) -> list[Course]:
        """Get all courses held at a location."""
        return [c for c in self.courses if c.location_id == location_id]

    def summary(self) -> dict[str, Any]:
        """Get a summary of the snapshot."""
        return {
            "tutors": len(self.tutors),
            "locations": len(self.locations),
            "courses": len(self.courses),
            "unavailable_dates": len(self.unavailable_dates),
            "week1_start_date": self.week1_start_date.isoformat() if self.week1_start_date else None,
            "funded_courses": sum(1 for c in self.courses if c.funded),
            "weekly_sessions": sum(len(c.days_of_week) for c in self.courses),
        }
