# tests/conftest.py

from datetime import date

import pytest
from fastapi.testclient import TestClient

from student_records.core.config import Settings
from student_records.core.database import Database
from student_records.main import create_application
from student_records.services.student import StudentService

STUDENTS_URL = "/api/v1/students"


def build_payload(**overrides):
    payload = {
        "name": "John Doe",
        "email": "john.doe@university.edu",
        "graduationYear": date.today().year + 1,
        "phoneNumber": "5551234567",
        "gpa": 3.8,
        "city": "New York",
        "state": "NY",
        "latitude": 40.7128,
        "longitude": -74.006,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'students.db'}",
        ENVIRONMENT="test",
    )


@pytest.fixture
def database(settings):
    db = Database(settings.DATABASE_URL)
    db.open()
    db.create_tables()
    yield db
    db.close()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def service(db_session):
    return StudentService(db_session)


@pytest.fixture
def client(settings):
    app = create_application(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def student_payload():
    return build_payload()


@pytest.fixture
def make_payload():
    return build_payload
