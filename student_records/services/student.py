"""Student management service."""

import json
import logging
from collections.abc import Mapping
from io import BytesIO, StringIO
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from student_records.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from student_records.models.base import utcnow
from student_records.models.student import Student
from student_records.schemas.common import FieldError
from student_records.schemas.student import (
    ExportFormat,
    StateCount,
    StatisticsResponse,
    StorageStatistics,
    StudentCreate,
    StudentFilter,
    StudentResponse,
    StudentUpdate,
    YearCount,
)
from student_records.services.statistics import compute_statistics
from student_records.utils.formatters import format_phone_number
from student_records.utils.validators import SNAKE_TO_CAMEL, validate_student

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A student with this email already exists"

# (header, attribute) pairs shared by the CSV and spreadsheet exports
EXPORT_COLUMNS = [
    ("ID", "id"),
    ("Name", "name"),
    ("Email", "email"),
    ("Phone", "phone_number"),
    ("GPA", "gpa"),
    ("Graduation Year", "graduation_year"),
    ("City", "city"),
    ("State", "state"),
    ("Latitude", "latitude"),
    ("Longitude", "longitude"),
]
TEXT_EXPORT_COLUMNS = {"name", "email", "phone_number", "city", "state"}

EXPORT_MEDIA_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def _schema_errors(exc: SchemaValidationError) -> list[dict[str, Any]]:
    errors = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "body"
        field = SNAKE_TO_CAMEL.get(field, field)
        errors.append(FieldError(field=field, message=error["msg"]).model_dump())
    return errors


def _quote_csv_text(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _raise_if_invalid(field_errors: list[FieldError]) -> None:
    if field_errors:
        raise ValidationFailedError([error.model_dump() for error in field_errors])


class StudentService:
    """Student management service."""

    def __init__(self, db: Session):
        self.db = db

    def list_students(self, filters: StudentFilter | None = None) -> list[StudentResponse]:
        """List students matching the filters, ordered by name."""
        query = select(Student)

        if filters:
            if filters.search:
                query = query.where(
                    or_(
                        Student.name.icontains(filters.search, autoescape=True),
                        Student.email.icontains(filters.search, autoescape=True),
                        Student.city.icontains(filters.search, autoescape=True),
                    )
                )
            if filters.graduation_year is not None:
                query = query.where(Student.graduation_year == filters.graduation_year)
            if filters.min_gpa is not None:
                query = query.where(Student.gpa >= filters.min_gpa)
            if filters.max_gpa is not None:
                query = query.where(Student.gpa <= filters.max_gpa)
            if filters.city:
                query = query.where(Student.city == filters.city)
            if filters.state:
                query = query.where(Student.state == filters.state)

        query = query.order_by(Student.name.asc(), Student.id.asc())
        students = self.db.execute(query).scalars().all()
        return [StudentResponse.model_validate(s) for s in students]

    def get_student(self, student_id: int) -> Student:
        """Get student by ID."""
        student = self.db.get(Student, student_id)
        if not student:
            raise NotFoundError("Student", str(student_id))
        return student

    def find_by_email(self, email: str) -> Student | None:
        result = self.db.execute(
            select(Student).where(Student.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    def create_student(self, payload: Mapping[str, Any]) -> StudentResponse:
        """Validate a raw payload and persist a new student."""
        _raise_if_invalid(validate_student(payload))
        try:
            request = StudentCreate.model_validate(dict(payload))
        except SchemaValidationError as e:
            raise ValidationFailedError(_schema_errors(e))

        if self.find_by_email(request.email):
            logger.warning(f"Rejected duplicate student email {request.email}")
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        student = Student(
            name=request.name,
            email=request.email,
            graduation_year=request.graduation_year,
            phone_number=format_phone_number(request.phone_number),
            gpa=request.gpa,
            city=request.city,
            state=request.state,
            latitude=request.latitude,
            longitude=request.longitude,
        )
        self.db.add(student)
        self._commit()
        self.db.refresh(student)
        logger.info(f"Student {student.id} created")
        return StudentResponse.model_validate(student)

    def update_student(self, student_id: int, payload: Mapping[str, Any]) -> StudentResponse:
        """Apply a partial update. Only the supplied fields are changed."""
        student = self.get_student(student_id)

        _raise_if_invalid(validate_student(payload, partial=True))
        try:
            request = StudentUpdate.model_validate(dict(payload))
        except SchemaValidationError as e:
            raise ValidationFailedError(_schema_errors(e))
        update_data = request.model_dump(exclude_unset=True)

        new_email = update_data.get("email")
        if new_email and new_email != student.email:
            existing = self.find_by_email(new_email)
            if existing and existing.id != student.id:
                logger.warning(f"Rejected email change for student {student_id}: {new_email} in use")
                raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        if update_data.get("phone_number"):
            update_data["phone_number"] = format_phone_number(update_data["phone_number"])

        for field, value in update_data.items():
            setattr(student, field, value)
        student.updated_at = utcnow()

        self._commit()
        self.db.refresh(student)
        logger.info(f"Student {student_id} updated ({', '.join(sorted(update_data)) or 'no fields'})")
        return StudentResponse.model_validate(student)

    def delete_student(self, student_id: int) -> None:
        """Delete a student."""
        result = self.db.execute(delete(Student).where(Student.id == student_id))
        if result.rowcount == 0:
            raise NotFoundError("Student", str(student_id))
        self._commit()
        logger.info(f"Student {student_id} deleted")

    def get_statistics(self) -> StatisticsResponse:
        """Summary statistics plus the database's own aggregates.

        The two are computed independently: the summary skips zero GPAs
        when averaging, the storage aggregates do not.
        """
        students = self.db.execute(select(Student)).scalars().all()
        return StatisticsResponse(
            summary=compute_statistics(students),
            storage=self._get_storage_statistics(),
        )

    def _get_storage_statistics(self) -> StorageStatistics:
        row = self.db.execute(
            select(
                func.count().label("total"),
                func.avg(Student.gpa).label("average"),
                func.max(Student.gpa).label("highest"),
                func.min(Student.gpa).label("lowest"),
            ).select_from(Student)
        ).one()

        by_year = self.db.execute(
            select(Student.graduation_year, func.count().label("count"))
            .group_by(Student.graduation_year)
            .order_by(Student.graduation_year.desc())
        ).all()

        by_state = self.db.execute(
            select(Student.state, func.count().label("count"))
            .where(Student.state.is_not(None))
            .group_by(Student.state)
            .order_by(func.count().desc(), Student.state)
        ).all()

        return StorageStatistics(
            total_students=row.total or 0,
            average_gpa=float(row.average or 0),
            highest_gpa=float(row.highest or 0),
            lowest_gpa=float(row.lowest or 0),
            students_by_year=[YearCount(year=r.graduation_year, count=r.count) for r in by_year],
            students_by_state=[StateCount(state=r.state, count=r.count) for r in by_state],
        )

    def export_students(self, export_format: ExportFormat = ExportFormat.JSON) -> bytes:
        """Serialize every student (unfiltered) in the requested format."""
        students = self.db.execute(
            select(Student).order_by(Student.name.asc(), Student.id.asc())
        ).scalars().all()
        logger.info(f"Exporting {len(students)} students as {export_format.value}")

        if export_format == ExportFormat.CSV:
            return self._export_csv(students).encode("utf-8")
        if export_format == ExportFormat.XLSX:
            return self._export_xlsx(students)

        records = [
            StudentResponse.model_validate(s).model_dump(mode="json", by_alias=True)
            for s in students
        ]
        return json.dumps(records, indent=2).encode("utf-8")

    def _export_csv(self, students: list[Student]) -> str:
        output = StringIO()
        # Header is written bare; rows quote text and leave numbers unquoted
        output.write(",".join(header for header, _ in EXPORT_COLUMNS) + "\n")
        for student in students:
            cells = []
            for _, attribute in EXPORT_COLUMNS:
                value = getattr(student, attribute)
                if attribute in TEXT_EXPORT_COLUMNS:
                    cells.append(_quote_csv_text(value or ""))
                else:
                    cells.append("" if value is None else str(value))
            output.write(",".join(cells) + "\n")
        return output.getvalue()

    def _export_xlsx(self, students: list[Student]) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = "Students"

        for col_idx, (header, _) in enumerate(EXPORT_COLUMNS, start=1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = Font(bold=True)

        for row_idx, student in enumerate(students, start=2):
            for col_idx, (_, attribute) in enumerate(EXPORT_COLUMNS, start=1):
                ws.cell(row=row_idx, column=col_idx, value=getattr(student, attribute))

        column_widths = [8, 25, 32, 16, 8, 16, 20, 10, 12, 12]
        for col_idx, width in enumerate(column_widths, start=1):
            ws.column_dimensions[chr(64 + col_idx)].width = width

        output = BytesIO()
        wb.save(output)
        output.seek(0)
        return output.getvalue()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            # Another request claimed the email between our check and the insert
            self.db.rollback()
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
