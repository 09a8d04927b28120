"""Student schemas."""

import enum
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from student_records.schemas.common import BaseSchema


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class StudentBase(BaseSchema):
    """Base student schema."""

    name: str = Field(..., min_length=2, max_length=255)
    email: str = Field(..., max_length=255)
    graduation_year: int
    phone_number: str = Field(..., max_length=20)
    gpa: float = Field(..., ge=0, le=4.0)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=50)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)


class StudentCreate(StudentBase):
    """Student creation schema.

    Built only after the payload has passed ``validate_student``.
    """

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("city", "state", "latitude", "longitude", mode="before")
    @classmethod
    def empty_as_missing(cls, v: Any) -> Any:
        return _blank_to_none(v)


class StudentUpdate(BaseSchema):
    """Student update schema. Only fields present in the payload are applied."""

    name: str | None = Field(None, min_length=2, max_length=255)
    email: str | None = Field(None, max_length=255)
    graduation_year: int | None = None
    phone_number: str | None = Field(None, max_length=20)
    gpa: float | None = Field(None, ge=0, le=4.0)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=50)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else None

    @field_validator("city", "state", "latitude", "longitude", mode="before")
    @classmethod
    def empty_as_missing(cls, v: Any) -> Any:
        return _blank_to_none(v)


class StudentResponse(StudentBase):
    """Student response schema."""

    id: int
    created_at: datetime
    updated_at: datetime


class StudentFilter(BaseSchema):
    """Student filter options."""

    search: str | None = None  # name, email or city
    graduation_year: int | None = None
    min_gpa: float | None = None
    max_gpa: float | None = None
    city: str | None = None
    state: str | None = None


class ExportFormat(str, enum.Enum):
    """Supported bulk export formats."""

    JSON = "json"
    CSV = "csv"
    XLSX = "xlsx"


# ==========================================
# Statistics Schemas
# ==========================================

class YearCount(BaseSchema):
    year: int
    count: int


class StateCount(BaseSchema):
    state: str
    count: int


class CityCount(BaseSchema):
    city: str
    count: int


class GPADistribution(BaseSchema):
    """Students per GPA band."""

    excellent: int = 0  # 3.5+
    good: int = 0  # 3.0 - 3.49
    satisfactory: int = 0  # 2.5 - 2.99
    needs_improvement: int = 0  # below 2.5


class StudentStatistics(BaseSchema):
    """Summary metrics computed over the in-memory student collection."""

    total_students: int = 0
    average_gpa: float = Field(0.0, alias="averageGPA")
    highest_gpa: float = Field(0.0, alias="highestGPA")
    lowest_gpa: float = Field(0.0, alias="lowestGPA")
    graduation_year_distribution: list[YearCount] = []
    top_states: list[StateCount] = []
    top_cities: list[CityCount] = []
    recent_additions: int = 0
    gpa_distribution: GPADistribution = Field(default_factory=GPADistribution)
    upcoming_graduations: int = 0


class StorageStatistics(BaseSchema):
    """Aggregates computed by the database over every stored row."""

    total_students: int = 0
    average_gpa: float = Field(0.0, alias="averageGPA")
    highest_gpa: float = Field(0.0, alias="highestGPA")
    lowest_gpa: float = Field(0.0, alias="lowestGPA")
    students_by_year: list[YearCount] = []
    students_by_state: list[StateCount] = []


class StatisticsResponse(BaseSchema):
    """Both statistics views, returned side by side."""

    summary: StudentStatistics
    storage: StorageStatistics
