"""Database models package."""

from student_records.models.base import IDMixin, TimestampMixin
from student_records.models.student import Student

__all__ = [
    "IDMixin",
    "TimestampMixin",
    "Student",
]
