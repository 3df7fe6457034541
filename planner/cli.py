"""
Command-line interface for the course planner engine.

Usage:
    python -m planner validate planner.json
    python -m planner conflicts planner.json --json
    python -m planner check planner.json C001
    python -m planner availability planner.json --tutor T001 --day 1 --start 09:00 --end 11:00
    python -m planner week planner.json --date 2024-10-07
    python -m planner grid planner.json --week 5
    python -m planner report planner.json --type tutor-schedule
"""

from __future__ import annotations

import json
import logging
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .data.loader import DataValidationError, load_planner_data
from .data.models import DAY_NAMES, WEEKDAYS, PlannerData, day_name, minutes_to_time
from .engine.availability import is_location_available, is_tutor_available
from .engine.calendar import get_current_week, get_week_start_date
from .engine.conflicts import detect_all_conflicts
from .engine.evaluation import CourseEvaluation, evaluate_all_courses, evaluate_course
from .output.reports import (
    ResourceSchedule,
    conflicts_report,
    course_list,
    courses_at_time_slot,
    location_utilization,
    tutor_schedule,
    upcoming_courses,
)

# Create Typer app
app = typer.Typer(
    name="planner",
    help="Course planner: availability, conflict and travel-time checks.",
    add_completion=False,
)

# Rich console for pretty output
console = Console()


class ReportType(str, Enum):
    TUTOR_SCHEDULE = "tutor-schedule"
    LOCATION_UTILIZATION = "location-utilization"
    COURSE_LIST = "course-list"
    CONFLICTS = "conflicts"
    UPCOMING = "upcoming"


# =============================================================================
# Helper Functions
# =============================================================================

def load_input(input_path: Path) -> PlannerData:
    """Load and validate a planner snapshot."""
    if not input_path.exists():
        console.print(f"[red]Error:[/red] Input file not found: {input_path}")
        raise typer.Exit(code=1)

    try:
        return load_planner_data(input_path)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON:[/red] {e}")
        raise typer.Exit(code=1)
    except DataValidationError as e:
        console.print("[red]Error loading input:[/red]")
        for line in str(e).split("\n"):
            console.print(f"   {line}")
        raise typer.Exit(code=1)


def parse_date_option(value: Optional[str]) -> date:
    """Parse a --date option, defaulting to today."""
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid date '{value}' (expected YYYY-MM-DD)")
        raise typer.Exit(code=1)


def data_warnings(data: PlannerData) -> list[str]:
    """Non-fatal data problems worth showing to the user."""
    warnings = []
    horizon = data.config.planning_weeks

    for course in data.courses:
        label = course.name or course.id
        weekend = [d for d in course.days_of_week if d not in WEEKDAYS]
        if weekend:
            warnings.append(
                f"Course '{label}' runs on {', '.join(day_name(d) for d in weekend)}"
            )
        if course.end_week > horizon:
            warnings.append(
                f"Course '{label}' ends in week {course.end_week}, beyond the {horizon}-week plan"
            )
        if course.tutor_id is not None and data.get_tutor(course.tutor_id) is None:
            warnings.append(f"Course '{label}' references unknown tutor: {course.tutor_id}")
        if course.location_id is not None and data.get_location(course.location_id) is None:
            warnings.append(f"Course '{label}' references unknown location: {course.location_id}")
        for tutor_id in course.qualified_tutors:
            if data.get_tutor(tutor_id) is None:
                warnings.append(f"Course '{label}' lists unknown qualified tutor: {tutor_id}")

    for loc in data.locations:
        for other_id in loc.travel_times:
            if data.get_location(other_id) is None:
                warnings.append(f"Location '{loc}' has travel time to unknown location: {other_id}")

    if data.week1_start_date is None:
        warnings.append("Week 1 start date is not set; blackout dates cannot be checked")

    return warnings


def print_evaluation(data: PlannerData, evaluation: CourseEvaluation) -> None:
    """Print one course evaluation."""
    course = evaluation.course
    status_color = "green" if evaluation.is_clean else "yellow" if evaluation.can_save else "red"
    status = "OK" if evaluation.is_clean else "WARNINGS" if evaluation.can_save else "BLOCKED"

    console.print(Panel(
        Text(status, style=f"bold {status_color}"),
        title=str(course),
        subtitle=f"{data.tutor_name(course.tutor_id)} @ {data.location_name(course.location_id)}",
    ))

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Check")
    table.add_column("Result")

    def mark(ok: bool) -> str:
        return "[green]PASS[/green]" if ok else "[red]FAIL[/red]"

    table.add_row("Tutor availability", mark(evaluation.tutor_available))
    table.add_row("Location availability", mark(evaluation.location_available))
    table.add_row("Qualification", mark(evaluation.qualified))
    table.add_row("Capacity", mark(evaluation.capacity_ok))
    table.add_row("Double-bookings", str(len(evaluation.conflicts)))
    table.add_row("Travel conflicts", str(len(evaluation.travel_conflicts)))
    table.add_row("Blackout dates", str(len(evaluation.blackout_hits)))
    console.print(table)

    for error in evaluation.errors:
        console.print(f"  [red]x[/red] {error}")
    for warning in evaluation.warnings:
        console.print(f"  [yellow]![/yellow] {warning}")


def _print_resource_schedules(schedules: list[ResourceSchedule], title: str, other_column: str) -> None:
    for schedule in schedules:
        console.print(Panel(
            f"[bold]{schedule.name}[/bold] ({schedule.id}) - "
            f"{schedule.course_count} courses, {schedule.weekly_minutes} min/week",
            title=title,
        ))
        if not schedule.rows:
            console.print("[dim]No courses[/dim]\n")
            continue

        table = Table(show_header=True, header_style="bold")
        table.add_column("Course", style="cyan")
        table.add_column("Days")
        table.add_column("Time")
        table.add_column("Weeks")
        table.add_column(other_column)
        for row in schedule.rows:
            other = row.location if other_column == "Location" else row.tutor
            table.add_row(row.name, row.days, row.time, row.weeks, other)
        console.print(table)
        console.print()


# =============================================================================
# Commands
# =============================================================================

@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level", "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """Course planner constraint checks."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def validate(
    input_file: Path = typer.Argument(
        ...,
        help="Path to planner JSON file to validate",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Evaluate every course and list issues",
    ),
) -> None:
    """
    Validate a planner snapshot.

    Checks for:
    - Valid JSON structure and field types
    - Duplicate IDs
    - Dangling tutor/location references
    - Courses outside the planning horizon or on weekends

    Example:
        python -m planner validate planner.json
    """
    console.print(f"\n[bold]Validating:[/bold] {input_file}\n")

    data = load_input(input_file)
    console.print("[green]Schema validation passed[/green]")

    warnings = data_warnings(data)
    if warnings:
        console.print("[yellow]Warnings found:[/yellow]")
        for w in warnings:
            console.print(f"   - {w}")
    else:
        console.print("[green]No data consistency issues[/green]")

    console.print("\n[bold]Summary:[/bold]")
    table = Table(show_header=False, box=None)
    table.add_column("Entity", style="cyan")
    table.add_column("Count", style="white")

    for key, value in data.summary().items():
        table.add_row(key.replace("_", " ").capitalize(), str(value) if value is not None else "-")

    console.print(table)

    evaluations = evaluate_all_courses(data)
    blocked = [e for e in evaluations if not e.can_save]
    console.print(
        f"\nCourses blocked by travel time or blackout dates: "
        f"[{'red' if blocked else 'green'}]{len(blocked)}[/]"
    )

    if verbose:
        for evaluation in evaluations:
            if not evaluation.is_clean:
                print_evaluation(data, evaluation)

    console.print("\n[green]Validation complete.[/green]\n")


@app.command()
def conflicts(
    input_file: Path = typer.Argument(..., help="Path to planner JSON file", exists=True),
    as_json: bool = typer.Option(False, "--json", help="Print conflicts as JSON"),
) -> None:
    """
    List every tutor and location double-booking.

    Example:
        python -m planner conflicts planner.json
    """
    data = load_input(input_file)
    records = detect_all_conflicts(data)

    if as_json:
        console.print_json(json.dumps([r.to_dict() for r in records]))
        return

    if not records:
        console.print("[green]No conflicts detected![/green]")
        return

    table = Table(title=f"{len(records)} conflict(s) found", show_header=True, header_style="bold cyan")
    table.add_column("Kind")
    table.add_column("Course")
    table.add_column("Conflicts with")
    table.add_column("Message")
    for record in records:
        table.add_row(
            record.kind.value,
            record.course.id,
            record.conflicting_course.id,
            record.message,
        )
    console.print(table)


@app.command()
def check(
    input_file: Path = typer.Argument(..., help="Path to planner JSON file", exists=True),
    course_id: str = typer.Argument(..., help="ID of the course to evaluate"),
    as_json: bool = typer.Option(False, "--json", help="Print the evaluation as JSON"),
) -> None:
    """
    Evaluate one course as if it were being saved.

    Exits with code 1 when travel-time conflicts or blackout dates block it.

    Example:
        python -m planner check planner.json C001
    """
    data = load_input(input_file)
    course = data.get_course(course_id)
    if course is None:
        console.print(f"[red]Error:[/red] Course '{course_id}' not found")
        console.print(f"Available courses: {', '.join(c.id for c in data.courses)}")
        raise typer.Exit(code=1)

    evaluation = evaluate_course(data, course)

    if as_json:
        console.print_json(json.dumps(evaluation.to_dict()))
    else:
        print_evaluation(data, evaluation)

    if not evaluation.can_save:
        raise typer.Exit(code=1)


@app.command()
def availability(
    input_file: Path = typer.Argument(..., help="Path to planner JSON file", exists=True),
    tutor: Optional[str] = typer.Option(None, "--tutor", "-T", help="Tutor ID"),
    location: Optional[str] = typer.Option(None, "--location", "-L", help="Location ID"),
    day: int = typer.Option(..., "--day", "-D", min=0, max=6, help="Day index (0=Sunday)"),
    start: str = typer.Option(..., "--start", help="Start time HH:MM"),
    end: str = typer.Option(..., "--end", help="End time HH:MM"),
) -> None:
    """
    Check whether a tutor or location is available for a time window.

    Example:
        python -m planner availability planner.json --tutor T001 --day 1 --start 09:00 --end 11:00
    """
    if (tutor is None) == (location is None):
        console.print("[red]Error:[/red] Give exactly one of --tutor or --location")
        raise typer.Exit(code=1)

    data = load_input(input_file)

    if tutor is not None:
        name = data.tutor_name(tutor)
        available = is_tutor_available(data, tutor, day, start, end)
    else:
        name = data.location_name(location)
        available = is_location_available(data, location, day, start, end)

    verdict = "[green]available[/green]" if available else "[red]not available[/red]"
    console.print(f"{name} is {verdict} on {day_name(day)} {start}-{end}")

    if not available:
        raise typer.Exit(code=1)


@app.command()
def week(
    input_file: Path = typer.Argument(..., help="Path to planner JSON file", exists=True),
    on: Optional[str] = typer.Option(None, "--date", help="Date to look up (YYYY-MM-DD), default today"),
) -> None:
    """
    Show the planning week for a date.

    Example:
        python -m planner week planner.json --date 2024-10-07
    """
    data = load_input(input_file)

    if data.week1_start_date is None:
        console.print("[yellow]Week 1 start date: Not Set[/yellow]")
        return

    today = parse_date_option(on)

    current = get_current_week(data.week1_start_date, today, data.config.planning_weeks)
    if current is None:
        console.print("[yellow]Outside planning period[/yellow]")
        return

    week_start = get_week_start_date(current, data.week1_start_date)
    console.print(f"Week {current} (w/b {week_start.strftime('%d %b')})")

    upcoming = upcoming_courses(data, current)
    if upcoming:
        table = Table(title="Upcoming", show_header=True, header_style="bold cyan")
        table.add_column("Course")
        table.add_column("When")
        table.add_column("Tutor")
        table.add_column("Location")
        table.add_column("Weeks")
        for course in upcoming:
            table.add_row(
                course.name or course.id,
                f"{day_name(min(course.days_of_week))[:3]} {course.start_time}",
                data.tutor_name(course.tutor_id),
                data.location_name(course.location_id),
                f"{course.start_week}-{course.end_week}",
            )
        console.print(table)


@app.command()
def grid(
    input_file: Path = typer.Argument(..., help="Path to planner JSON file", exists=True),
    week_number: int = typer.Option(1, "--week", "-w", min=1, help="First week shown"),
    weeks: int = typer.Option(1, "--weeks", help="Number of weeks covered", min=1),
) -> None:
    """
    Hourly grid of course counts for Monday to Friday.

    Example:
        python -m planner grid planner.json --week 5 --weeks 4
    """
    data = load_input(input_file)
    last_week = week_number + weeks - 1
    periods = data.config.periods
    first_hour = periods[0].start_minutes // 60
    last_hour = (periods[-1].end_minutes - 1) // 60

    table = Table(title=f"Weeks {week_number}-{last_week}", show_header=True, header_style="bold cyan")
    table.add_column("Time", style="dim")
    days = sorted(WEEKDAYS)
    for day in days:
        table.add_column(DAY_NAMES[day][:3], justify="center")

    for hour in range(first_hour, last_hour + 1):
        slot = minutes_to_time(hour * 60)
        row = [slot]
        for day in days:
            matching = courses_at_time_slot(data, week_number, last_week, day, slot)
            row.append(str(len(matching)) if matching else "-")
        table.add_row(*row)

    console.print(table)


@app.command()
def report(
    input_file: Path = typer.Argument(..., help="Path to planner JSON file", exists=True),
    report_type: ReportType = typer.Option(
        ReportType.COURSE_LIST,
        "--type", "-t",
        help="Which report to show",
    ),
    on: Optional[str] = typer.Option(None, "--date", help="Reference date for the upcoming report"),
) -> None:
    """
    Show a planner report.

    Examples:
        python -m planner report planner.json --type tutor-schedule
        python -m planner report planner.json --type conflicts
    """
    data = load_input(input_file)

    if report_type == ReportType.TUTOR_SCHEDULE:
        _print_resource_schedules(tutor_schedule(data), "Tutor Schedule", "Location")

    elif report_type == ReportType.LOCATION_UTILIZATION:
        _print_resource_schedules(location_utilization(data), "Location Utilization", "Tutor")

    elif report_type == ReportType.COURSE_LIST:
        table = Table(title="Course List", show_header=True, header_style="bold cyan")
        for column in ("Course", "Tutor", "Location", "Days", "Time", "Start Week", "Duration"):
            table.add_column(column)
        for row in course_list(data):
            table.add_row(
                row.name, row.tutor, row.location, row.days, row.time,
                str(row.start_week), f"{row.duration} weeks",
            )
        console.print(table)

    elif report_type == ReportType.CONFLICTS:
        summary = conflicts_report(data)
        if not summary.has_conflicts:
            console.print("[green]No conflicts detected![/green]")
            return
        console.print(
            f"[bold yellow]{len(summary.conflicts)} conflict(s) found[/bold yellow] "
            f"({summary.tutor_conflicts} tutor, {summary.location_conflicts} location)"
        )
        for record in summary.conflicts:
            console.print(f"  [yellow]*[/yellow] {record.message}")

    elif report_type == ReportType.UPCOMING:
        today = parse_date_option(on)
        current = get_current_week(data.week1_start_date, today, data.config.planning_weeks)
        if current is None:
            console.print("[yellow]Set Week 1 start date to see upcoming courses[/yellow]")
            return
        courses = upcoming_courses(data, current)
        if not courses:
            console.print("[dim]No upcoming courses this week[/dim]")
            return
        for course in courses:
            console.print(
                f"  {course.name or course.id}: {day_name(min(course.days_of_week))[:3]} "
                f"{course.start_time} - {data.tutor_name(course.tutor_id)} @ "
                f"{data.location_name(course.location_id)} (wk {course.start_week}-{course.end_week})"
            )


# =============================================================================
# Main Entry Point
# =============================================================================

def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
