"""Student model."""

from sqlalchemy import CheckConstraint, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from student_records.core.database import Base
from student_records.models.base import IDMixin, TimestampMixin


class Student(Base, IDMixin, TimestampMixin):
    """Student record."""

    __tablename__ = "students"
    __table_args__ = (
        CheckConstraint("gpa >= 0 AND gpa <= 4", name="ck_students_gpa_range"),
        Index("idx_students_graduation_year", "graduation_year"),
        Index("idx_students_gpa", "gpa"),
        Index("idx_students_location", "city", "state"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    graduation_year: Mapped[int] = mapped_column(nullable=False)
    # Stored in display form: (XXX) XXX-XXXX
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)
    gpa: Mapped[float] = mapped_column(Numeric(3, 2, asdecimal=False), nullable=False)

    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Numeric(10, 7, asdecimal=False), nullable=True)
    longitude: Mapped[float | None] = mapped_column(Numeric(10, 7, asdecimal=False), nullable=True)

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.name}, email={self.email})>"
