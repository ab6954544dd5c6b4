"""Student records and the student directory.

Students are keyed by registration id. The directory is the sole owner
of Student objects; tutor profiles hold references to them, never copies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from tutoring.core.directory import Directory
from tutoring.core.errors import (
    AlreadyExistsError,
    ErrorContext,
    InvalidArgumentError,
    TutoringError,
)
from tutoring.core.ordering import OrderBy
from tutoring.utils.validators import (
    require_email,
    require_in_range,
    require_non_blank_text,
    require_positive,
)

logger = structlog.get_logger(__name__)

DEFAULT_SATISFACTION = 5


@dataclass(eq=False)
class Student:
    """A registered student.

    Identity fields are fixed after creation; only ``satisfaction`` changes.
    Two students are equal when both email and registration id match.
    """

    registration_id: str
    name: str
    course_code: int
    email: str
    phone: str = ""
    satisfaction: int = DEFAULT_SATISFACTION

    def __post_init__(self):
        require_non_blank_text(self.name, "Name cannot be blank")
        require_non_blank_text(self.registration_id, "Registration id cannot be blank")
        require_positive(self.course_code, "Course code must be positive")
        require_email(self.email, "Invalid email")
        if self.phone is None:
            self.phone = ""
        require_in_range(self.satisfaction, 1, 5, "Satisfaction must be between 1 and 5")

    def set_satisfaction(self, value: int) -> None:
        """Replace the satisfaction score (1-5)."""
        require_in_range(value, 1, 5, "Satisfaction must be between 1 and 5")
        self.satisfaction = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Student):
            return NotImplemented
        return (self.email, self.registration_id) == (other.email, other.registration_id)

    def __hash__(self) -> int:
        return hash((self.email, self.registration_id))

    def __str__(self) -> str:
        parts = [self.registration_id, self.name, str(self.course_code)]
        if self.phone:
            parts.append(self.phone)
        parts.append(self.email)
        return " - ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "registration_id": self.registration_id,
            "name": self.name,
            "course_code": self.course_code,
            "phone": self.phone,
            "email": self.email,
            "satisfaction": self.satisfaction,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Student:
        return cls(
            registration_id=data["registration_id"],
            name=data["name"],
            course_code=data["course_code"],
            email=data["email"],
            phone=data.get("phone", ""),
            satisfaction=data.get("satisfaction", DEFAULT_SATISFACTION),
        )


class StudentDirectory(Directory[Student]):
    """Registry of students keyed by registration id."""

    kind = "Student"

    def register_student(
        self,
        name: str,
        registration_id: str,
        course_code: int,
        phone: str,
        email: str,
    ) -> Student:
        """Create and register a student.

        Raises:
            InvalidArgumentError: On malformed fields.
            AlreadyExistsError: If the registration id or email is taken.
        """
        try:
            require_non_blank_text(registration_id, "Registration id cannot be blank")
            student = Student(
                registration_id=registration_id,
                name=name,
                course_code=course_code,
                email=email,
                phone=phone or "",
            )
            if self.exists(registration_id):
                raise AlreadyExistsError("Student already registered")
            if self.find_by_email(email) is not None:
                raise AlreadyExistsError("Email already in use")
            self.register(registration_id, student)
        except TutoringError as e:
            raise e.with_context(ErrorContext.REGISTER_STUDENT) from e

        logger.info("students.registered", registration_id=registration_id)
        return student

    def get_student(self, registration_id: str) -> Student:
        """Fetch a student, failing on blank or unknown ids."""
        try:
            require_non_blank_text(registration_id, "Registration id cannot be blank")
            return self.lookup(registration_id)
        except TutoringError as e:
            raise e.with_context(ErrorContext.LOOKUP_STUDENT) from e

    def find_by_email(self, email: str) -> Student | None:
        for student in self:
            if student.email == email:
                return student
        return None

    def student_info(self, registration_id: str, attribute: str | OrderBy) -> str:
        """Return one of the student's name, phone or email."""
        try:
            student = self.get_student(registration_id)
            option = OrderBy.parse(attribute)
            if option is OrderBy.NAME:
                return student.name
            if option is OrderBy.PHONE:
                return student.phone
            if option is OrderBy.EMAIL:
                return student.email
            raise InvalidArgumentError(f"Invalid attribute: {attribute!r}")
        except TutoringError as e:
            raise e.with_context(ErrorContext.STUDENT_INFO) from e
