"""Student management endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, status
from fastapi.responses import Response

from student_records.core.dependencies import StudentId, StudentServiceDep
from student_records.schemas.common import MessageResponse, SuccessResponse
from student_records.schemas.student import (
    ExportFormat,
    StatisticsResponse,
    StudentFilter,
    StudentResponse,
)
from student_records.services.student import EXPORT_MEDIA_TYPES

router = APIRouter()

StudentPayload = Annotated[dict[str, Any], Body(description="Student fields (camelCase)")]


@router.get("", response_model=SuccessResponse[list[StudentResponse]])
def list_students(
    service: StudentServiceDep,
    search: str | None = Query(None, description="Matches name, email or city"),
    graduation_year: int | None = Query(None, alias="graduationYear"),
    min_gpa: float | None = Query(None, alias="minGpa"),
    max_gpa: float | None = Query(None, alias="maxGpa"),
    city: str | None = None,
    state: str | None = None,
):
    """List students, optionally filtered. Ordered by name."""
    filters = StudentFilter(
        search=search,
        graduation_year=graduation_year,
        min_gpa=min_gpa,
        max_gpa=max_gpa,
        city=city,
        state=state,
    )
    return SuccessResponse(data=service.list_students(filters))


@router.get("/statistics", response_model=SuccessResponse[StatisticsResponse])
def get_statistics(service: StudentServiceDep):
    """Aggregate statistics over every student."""
    return SuccessResponse(data=service.get_statistics())


@router.get("/export")
def export_students(
    service: StudentServiceDep,
    export_format: ExportFormat = Query(ExportFormat.JSON, alias="format"),
):
    """Download every student as JSON, CSV or an Excel workbook."""
    content = service.export_students(export_format)
    return Response(
        content=content,
        media_type=EXPORT_MEDIA_TYPES[export_format],
        headers={
            "Content-Disposition": f"attachment; filename=students.{export_format.value}",
        },
    )


@router.get("/{student_id}", response_model=SuccessResponse[StudentResponse])
def get_student(student_id: StudentId, service: StudentServiceDep):
    """Get a student by ID."""
    student = service.get_student(student_id)
    return SuccessResponse(data=StudentResponse.model_validate(student))


@router.post(
    "",
    response_model=SuccessResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_student(payload: StudentPayload, service: StudentServiceDep):
    """Create a new student."""
    return SuccessResponse(data=service.create_student(payload))


@router.put("/{student_id}", response_model=SuccessResponse[StudentResponse])
def update_student(student_id: StudentId, payload: StudentPayload, service: StudentServiceDep):
    """Update a student. Fields left out of the payload keep their values."""
    return SuccessResponse(data=service.update_student(student_id, payload))


@router.delete("/{student_id}", response_model=SuccessResponse[MessageResponse])
def delete_student(student_id: StudentId, service: StudentServiceDep):
    """Delete a student."""
    service.delete_student(student_id)
    return SuccessResponse(data=MessageResponse(message="Student deleted successfully"))
