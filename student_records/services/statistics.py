"""Summary statistics over an in-memory student collection."""

from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

from student_records.models.base import utcnow
from student_records.schemas.student import (
    CityCount,
    GPADistribution,
    StateCount,
    StudentStatistics,
    YearCount,
)

RECENT_WINDOW = timedelta(days=30)
TOP_LOCATIONS_LIMIT = 5

# Lower bounds of the GPA bands
EXCELLENT_GPA = 3.5
GOOD_GPA = 3.0
SATISFACTORY_GPA = 2.5


class StudentLike(Protocol):
    gpa: Any
    graduation_year: int
    city: str | None
    state: str | None
    created_at: datetime


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _top(counter: Counter, limit: int = TOP_LOCATIONS_LIMIT) -> list[tuple[str, int]]:
    # sorted() is stable and Counter keeps insertion order, so ties stay
    # in the order they were first seen
    return sorted(counter.items(), key=lambda item: item[1], reverse=True)[:limit]


def compute_statistics(
    students: Iterable[StudentLike],
    now: datetime | None = None,
) -> StudentStatistics:
    """Compute summary metrics for a collection of students.

    Average, highest and lowest GPA only consider students with a GPA above
    zero, while the GPA bands count every student.
    """
    students = list(students)
    if not students:
        return StudentStatistics()

    now = _as_utc(now) if now is not None else utcnow()
    current_year = now.year
    recent_cutoff = now - RECENT_WINDOW

    gpas: list[float] = []
    years: Counter = Counter()
    states: Counter = Counter()
    cities: Counter = Counter()
    bands = GPADistribution()
    recent_additions = 0
    upcoming_graduations = 0

    for student in students:
        gpa = float(student.gpa or 0)
        if gpa > 0:
            gpas.append(gpa)

        if gpa >= EXCELLENT_GPA:
            bands.excellent += 1
        elif gpa >= GOOD_GPA:
            bands.good += 1
        elif gpa >= SATISFACTORY_GPA:
            bands.satisfactory += 1
        else:
            bands.needs_improvement += 1

        years[student.graduation_year] += 1
        if student.state:
            states[student.state] += 1
        if student.city:
            cities[student.city] += 1

        if student.created_at and _as_utc(student.created_at) >= recent_cutoff:
            recent_additions += 1

        if student.graduation_year in (current_year, current_year + 1):
            upcoming_graduations += 1

    return StudentStatistics(
        total_students=len(students),
        average_gpa=sum(gpas) / len(gpas) if gpas else 0.0,
        highest_gpa=max(gpas) if gpas else 0.0,
        lowest_gpa=min(gpas) if gpas else 0.0,
        graduation_year_distribution=[
            YearCount(year=year, count=count) for year, count in sorted(years.items())
        ],
        top_states=[StateCount(state=state, count=count) for state, count in _top(states)],
        top_cities=[CityCount(city=city, count=count) for city, count in _top(cities)],
        recent_additions=recent_additions,
        gpa_distribution=bands,
        upcoming_graduations=upcoming_graduations,
    )
