# tests/test_student_service.py

import csv
import json
from datetime import datetime, timezone
from io import BytesIO, StringIO

import pytest
from openpyxl import load_workbook

from student_records.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from student_records.models.student import Student
from student_records.schemas.student import ExportFormat, StudentFilter
from student_records.services import student as student_service
from tests.conftest import build_payload


def test_create_student_normalizes_and_formats(service):
    student = service.create_student(
        build_payload(email="  John.Doe@University.EDU ", phoneNumber="555-123-4567", city="")
    )

    assert student.id >= 1
    assert student.email == "john.doe@university.edu"
    assert student.phone_number == "(555) 123-4567"
    assert student.city is None
    assert student.created_at is not None


def test_create_student_rejects_invalid_payload(service, db_session):
    with pytest.raises(ValidationFailedError) as exc_info:
        service.create_student(build_payload(gpa=5.0, email="nope"))

    fields = [error["field"] for error in exc_info.value.errors]
    assert fields == ["email", "gpa"]
    assert db_session.query(Student).count() == 0


def test_create_student_rejects_duplicate_email_case_insensitively(service):
    service.create_student(build_payload())

    with pytest.raises(ConflictError) as exc_info:
        service.create_student(build_payload(name="Other", email="JOHN.DOE@university.edu"))

    assert exc_info.value.message == "A student with this email already exists"
    assert exc_info.value.status_code == 409


def test_coordinates_of_zero_are_stored(service):
    student = service.create_student(build_payload(latitude=0, longitude=0))

    assert student.latitude == 0
    assert student.longitude == 0


def test_get_student_missing(service):
    with pytest.raises(NotFoundError) as exc_info:
        service.get_student(999)

    assert exc_info.value.message == "Student not found"


def test_update_student_changes_only_supplied_fields(service, monkeypatch):
    created = service.create_student(build_payload())
    edited_at = datetime(2031, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    monkeypatch.setattr(student_service, "utcnow", lambda: edited_at)

    updated = service.update_student(created.id, {"gpa": 3.1, "phoneNumber": "5559876543"})

    assert updated.gpa == 3.1
    assert updated.phone_number == "(555) 987-6543"
    assert updated.name == created.name
    assert updated.email == created.email
    assert updated.updated_at.replace(tzinfo=None) == edited_at.replace(tzinfo=None)
    assert updated.created_at == created.created_at


def test_update_student_can_keep_own_email(service):
    created = service.create_student(build_payload())

    updated = service.update_student(created.id, {"email": "John.Doe@University.edu", "name": "Johnny"})

    assert updated.email == "john.doe@university.edu"
    assert updated.name == "Johnny"


def test_update_student_rejects_email_of_another_student(service):
    service.create_student(build_payload())
    other = service.create_student(build_payload(name="Jane Roe", email="jane@university.edu"))

    with pytest.raises(ConflictError):
        service.update_student(other.id, {"email": "john.doe@university.edu"})


def test_update_student_validates_supplied_fields(service):
    created = service.create_student(build_payload())

    with pytest.raises(ValidationFailedError) as exc_info:
        service.update_student(created.id, {"graduationYear": 1900})

    assert exc_info.value.errors == [
        {"field": "graduationYear", "message": "Please provide a valid graduation year"}
    ]


def test_update_missing_student_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.update_student(42, {"gpa": 3.0})


def test_delete_student(service):
    created = service.create_student(build_payload())

    service.delete_student(created.id)

    with pytest.raises(NotFoundError):
        service.get_student(created.id)
    with pytest.raises(NotFoundError):
        service.delete_student(created.id)


@pytest.fixture
def roster(service):
    payloads = [
        build_payload(name="Zoe Park", email="zoe@university.edu", gpa=3.9, city="Seattle", state="WA"),
        build_payload(name="Adam Smith", email="adam@college.org", gpa=2.4, city="Austin", state="TX"),
        build_payload(name="Maria 100% Lopez", email="maria@university.edu", gpa=3.2, city="Boston", state="MA"),
        build_payload(name="Ben Ode", email="ben@university.edu", gpa=3.5, city=None, state=None,
                      graduationYear=build_payload()["graduationYear"] + 1),
    ]
    return [service.create_student(p) for p in payloads]


def test_list_students_orders_by_name(service, roster):
    names = [s.name for s in service.list_students()]

    assert names == ["Adam Smith", "Ben Ode", "Maria 100% Lopez", "Zoe Park"]


@pytest.mark.parametrize(
    "filters, expected",
    [
        ({"search": "UNIVERSITY"}, ["Ben Ode", "Maria 100% Lopez", "Zoe Park"]),
        ({"search": "austin"}, ["Adam Smith"]),
        ({"search": "100%"}, ["Maria 100% Lopez"]),
        ({"min_gpa": 3.2, "max_gpa": 3.5}, ["Ben Ode", "Maria 100% Lopez"]),
        ({"state": "WA"}, ["Zoe Park"]),
        ({"city": "Boston"}, ["Maria 100% Lopez"]),
    ],
)
def test_list_students_filters(service, roster, filters, expected):
    names = [s.name for s in service.list_students(StudentFilter(**filters))]

    assert names == expected


def test_list_students_by_graduation_year(service, roster):
    year = roster[-1].graduation_year

    names = [s.name for s in service.list_students(StudentFilter(graduation_year=year))]

    assert names == ["Ben Ode"]


def test_statistics_on_empty_store(service):
    stats = service.get_statistics()

    assert stats.summary.total_students == 0
    assert stats.storage.total_students == 0
    assert stats.storage.average_gpa == 0
    assert stats.storage.students_by_state == []


def test_statistics_summary_and_storage(service, roster):
    service.create_student(build_payload(name="Zero Gpa", email="zero@university.edu", gpa=0, state="TX"))

    stats = service.get_statistics()

    assert stats.summary.total_students == 5
    assert stats.summary.average_gpa == pytest.approx((3.9 + 2.4 + 3.2 + 3.5) / 4)
    assert stats.summary.lowest_gpa == 2.4
    # the database average includes the zero GPA
    assert stats.storage.average_gpa == pytest.approx((3.9 + 2.4 + 3.2 + 3.5) / 5)
    assert stats.storage.lowest_gpa == 0
    assert stats.storage.students_by_state[0].state == "TX"
    assert stats.storage.students_by_state[0].count == 2
    years = [entry.year for entry in stats.storage.students_by_year]
    assert years == sorted(years, reverse=True)


def test_export_json(service, roster):
    records = json.loads(service.export_students(ExportFormat.JSON))

    assert len(records) == 4
    assert records[0]["name"] == "Adam Smith"
    assert records[0]["phoneNumber"] == "(555) 123-4567"
    assert "graduationYear" in records[0]


def test_export_csv(service, roster):
    text = service.export_students(ExportFormat.CSV).decode("utf-8")
    lines = text.splitlines()

    assert lines[0] == "ID,Name,Email,Phone,GPA,Graduation Year,City,State,Latitude,Longitude"
    assert lines[1].startswith(f'{roster[1].id},"Adam Smith","adam@college.org","(555) 123-4567",2.4,')

    rows = list(csv.reader(StringIO(text)))
    ben = next(row for row in rows if row[1] == "Ben Ode")
    assert ben[6] == ""
    assert ben[7] == ""


def test_export_xlsx(service, roster):
    workbook = load_workbook(BytesIO(service.export_students(ExportFormat.XLSX)))
    sheet = workbook["Students"]

    assert sheet.cell(row=1, column=1).value == "ID"
    assert sheet.cell(row=1, column=1).font.bold
    assert sheet.cell(row=2, column=2).value == "Adam Smith"
    assert sheet.max_row == 5


def test_export_csv_leaves_missing_numbers_unquoted(service):
    student = service.create_student(
        build_payload(name='Dana "DJ" Jones', city=None, latitude=None, longitude=None)
    )

    line = service.export_students(ExportFormat.CSV).decode("utf-8").splitlines()[1]

    assert line == (
        f'{student.id},"Dana ""DJ"" Jones","john.doe@university.edu","(555) 123-4567",'
        f'3.8,{student.graduation_year},"","NY",,'
    )
