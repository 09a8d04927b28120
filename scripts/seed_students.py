"""Load the sample student roster into the configured database."""

import logging

from student_records.core.config import get_settings
from student_records.core.database import Database
from student_records.core.exceptions import ConflictError, ValidationFailedError
from student_records.services.student import StudentService

logger = logging.getLogger("seed_students")

SAMPLE_STUDENTS = [
    {"name": "Emma Johnson", "email": "emma.johnson@university.edu", "graduationYear": 2024,
     "phoneNumber": "5551234567", "gpa": 3.85, "city": "New York", "state": "NY",
     "latitude": 40.7128, "longitude": -74.0060},
    {"name": "Michael Chen", "email": "michael.chen@university.edu", "graduationYear": 2025,
     "phoneNumber": "5552345678", "gpa": 3.92, "city": "San Francisco", "state": "CA",
     "latitude": 37.7749, "longitude": -122.4194},
    {"name": "Sarah Williams", "email": "sarah.williams@university.edu", "graduationYear": 2024,
     "phoneNumber": "5553456789", "gpa": 3.67, "city": "Chicago", "state": "IL",
     "latitude": 41.8781, "longitude": -87.6298},
    {"name": "James Rodriguez", "email": "james.rodriguez@university.edu", "graduationYear": 2026,
     "phoneNumber": "5554567890", "gpa": 3.78, "city": "Austin", "state": "TX",
     "latitude": 30.2672, "longitude": -97.7431},
    {"name": "Ashley Davis", "email": "ashley.davis@university.edu", "graduationYear": 2025,
     "phoneNumber": "5555678901", "gpa": 3.95, "city": "Seattle", "state": "WA",
     "latitude": 47.6062, "longitude": -122.3321},
    {"name": "David Thompson", "email": "david.thompson@university.edu", "graduationYear": 2024,
     "phoneNumber": "5556789012", "gpa": 3.23, "city": "Miami", "state": "FL",
     "latitude": 25.7617, "longitude": -80.1918},
    {"name": "Jennifer Lee", "email": "jennifer.lee@university.edu", "graduationYear": 2027,
     "phoneNumber": "5557890123", "gpa": 3.89, "city": "Boston", "state": "MA",
     "latitude": 42.3601, "longitude": -71.0589},
    {"name": "Robert Garcia", "email": "robert.garcia@university.edu", "graduationYear": 2026,
     "phoneNumber": "5558901234", "gpa": 2.94, "city": "Denver", "state": "CO"},
]


def seed(database: Database) -> int:
    """Insert the sample roster, skipping students that already exist."""
    created = 0
    with database.session_scope() as session:
        service = StudentService(session)
        for payload in SAMPLE_STUDENTS:
            try:
                service.create_student(payload)
                created += 1
            except ConflictError:
                logger.info(f"Skipping {payload['email']}: already present")
            except ValidationFailedError as e:
                logger.warning(f"Skipping {payload['email']}: {e.errors}")
    return created


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    settings = get_settings()
    database = Database(settings.DATABASE_URL)
    database.open()
    try:
        database.create_tables()
        created = seed(database)
        logger.info(f"Seeded {created} of {len(SAMPLE_STUDENTS)} students")
    finally:
        database.close()


if __name__ == "__main__":
    main()
