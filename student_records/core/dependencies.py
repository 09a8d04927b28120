"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends, Path

from student_records.core.database import DbSession
from student_records.core.exceptions import InvalidIdError
from student_records.services.student import StudentService

# Largest value a 64-bit INTEGER primary key can hold
MAX_ID = 2**63 - 1


def get_student_service(db: DbSession) -> StudentService:
    return StudentService(db)


def valid_student_id(
    student_id: Annotated[str, Path(description="Student ID")],
) -> int:
    """Parse the path id, rejecting anything but a positive integer."""
    if not student_id.isdecimal() or not 1 <= int(student_id) <= MAX_ID:
        raise InvalidIdError("Student")
    return int(student_id)


# Type aliases for dependency injection
StudentServiceDep = Annotated[StudentService, Depends(get_student_service)]
StudentId = Annotated[int, Depends(valid_student_id)]
