"""Tutor profiles and the tutor directory.

A TutorProfile wraps exactly one Student by reference and delegates
identity reads (name, email, phone, registration id) to it. On top of
that it holds the tutoring state: subjects with proficiency, the rating
that drives the reputation tier, attendance slots, attendance locations
and the accrued donation balance in cents.

The TutorDirectory keys profiles by the student's email.
"""

from __future__ import annotations

from typing import Any

import structlog

from tutoring.core.directory import Directory
from tutoring.core.errors import ErrorContext, InvalidArgumentError, TutoringError
from tutoring.core.reputation import INITIAL_RATING, Tier, tier_for_rating, updated_rating
from tutoring.core.students import Student
from tutoring.utils.validators import (
    require_in_range,
    require_non_blank_text,
    require_non_negative,
    require_not_null,
)

logger = structlog.get_logger(__name__)

MIN_PROFICIENCY = 1
MAX_PROFICIENCY = 5


def _require_subject(subject: str, proficiency: int) -> None:
    require_non_blank_text(subject, "Subject cannot be blank")
    require_in_range(
        proficiency, MIN_PROFICIENCY, MAX_PROFICIENCY, "Proficiency must be between 1 and 5"
    )


def _require_slot(time: str, day: str) -> None:
    require_non_blank_text(time, "Time cannot be blank")
    require_non_blank_text(day, "Day cannot be blank")


class TutorProfile:
    """Tutoring state layered over a Student."""

    def __init__(self, subject: str, proficiency: int, student: Student):
        require_not_null(student, "Student cannot be null")
        _require_subject(subject, proficiency)

        self._student = student
        self._subjects: dict[str, int] = {subject: proficiency}
        self._rating = INITIAL_RATING
        self._schedule: set[tuple[str, str]] = set()
        self._locations: set[str] = set()
        self._balance = 0

    # -- identity, delegated to the wrapped student --------------------------

    @property
    def student(self) -> Student:
        return self._student

    @property
    def registration_id(self) -> str:
        return self._student.registration_id

    @property
    def name(self) -> str:
        return self._student.name

    @property
    def email(self) -> str:
        return self._student.email

    @property
    def phone(self) -> str:
        return self._student.phone

    @property
    def course_code(self) -> int:
        return self._student.course_code

    @property
    def satisfaction(self) -> int:
        return self._student.satisfaction

    # -- subjects ------------------------------------------------------------

    @property
    def subjects(self) -> dict[str, int]:
        return dict(self._subjects)

    def has_subject(self, subject: str) -> bool:
        return subject in self._subjects

    def add_subject(self, subject: str, proficiency: int) -> None:
        """Add a subject.

        Raises:
            InvalidArgumentError: On a blank subject, a proficiency outside
                1-5, or a subject the tutor already teaches.
        """
        _require_subject(subject, proficiency)
        if subject in self._subjects:
            raise InvalidArgumentError("Already tutors this subject")
        self._subjects[subject] = proficiency

    # -- reputation ----------------------------------------------------------

    @property
    def rating(self) -> float:
        return self._rating

    @property
    def tier(self) -> Tier:
        return tier_for_rating(self._rating)

    def apply_rating(self, score: float) -> None:
        self._rating = updated_rating(self._rating, score)

    # -- attendance ----------------------------------------------------------

    @property
    def schedule(self) -> frozenset[tuple[str, str]]:
        """Attendance slots as ``(day, time)`` pairs."""
        return frozenset(self._schedule)

    @property
    def locations(self) -> frozenset[str]:
        return frozenset(self._locations)

    def add_schedule(self, time: str, day: str) -> None:
        _require_slot(time, day)
        self._schedule.add((day, time))

    def add_location(self, location: str) -> None:
        require_non_blank_text(location, "Location cannot be blank")
        self._locations.add(location)

    def has_schedule(self, time: str, day: str) -> bool:
        _require_slot(time, day)
        return (day, time) in self._schedule

    def has_location(self, location: str) -> bool:
        require_non_blank_text(location, "Location cannot be blank")
        return location in self._locations

    # -- money ---------------------------------------------------------------

    @property
    def balance(self) -> int:
        """Accrued donations, in cents."""
        return self._balance

    def credit(self, cents: int) -> None:
        require_non_negative(cents, "Credit cannot be negative")
        self._balance += cents

    # -- misc ----------------------------------------------------------------

    def __str__(self) -> str:
        return str(self._student)

    def __repr__(self) -> str:
        return (
            f"TutorProfile(email={self.email!r}, subjects={self._subjects!r}, "
            f"rating={self._rating:.2f}, tier={self.tier.value!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        The tier is not stored; it is re-derived from the rating on load.
        """
        return {
            "registration_id": self.registration_id,
            "subjects": dict(self._subjects),
            "rating": self._rating,
            "schedule": [{"day": day, "time": time} for day, time in sorted(self._schedule)],
            "locations": sorted(self._locations),
            "balance": self._balance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], student: Student) -> TutorProfile:
        subjects = data.get("subjects") or {}
        if not subjects:
            raise ValueError("Tutor record has no subjects")
        items = iter(subjects.items())
        subject, proficiency = next(items)
        tutor = cls(subject, proficiency, student)
        for subject, proficiency in items:
            tutor.add_subject(subject, proficiency)
        tutor._rating = float(data.get("rating", INITIAL_RATING))
        for slot in data.get("schedule", []):
            tutor.add_schedule(slot["time"], slot["day"])
        for location in data.get("locations", []):
            tutor.add_location(location)
        tutor._balance = int(data.get("balance", 0))
        return tutor


class TutorDirectory(Directory[TutorProfile]):
    """Registry of tutor profiles keyed by email."""

    kind = "Tutor"

    def register_tutor(self, subject: str, proficiency: int, student: Student) -> TutorProfile:
        """Promote ``student`` to tutor of ``subject``.

        Raises:
            NullReferenceError: If ``student`` is None.
            InvalidArgumentError: On a blank subject or bad proficiency.
            AlreadyExistsError: If the student is already a tutor.
        """
        try:
            tutor = TutorProfile(subject, proficiency, student)
            self.register(student.email, tutor)
        except TutoringError as e:
            raise e.with_context(ErrorContext.REGISTER_TUTOR) from e

        logger.info(
            "tutors.registered",
            email=student.email,
            subject=subject,
            proficiency=proficiency,
        )
        return tutor

    def get_tutor(self, email: str) -> TutorProfile:
        """Fetch a tutor by email.

        Raises:
            InvalidArgumentError: If ``email`` is blank.
            NotFoundError: If no tutor is registered under ``email``.
        """
        require_non_blank_text(email, "Email cannot be blank")
        return self.lookup(email)

    def add_subject(self, email: str, subject: str, proficiency: int) -> None:
        try:
            tutor = self.get_tutor(email)
            tutor.add_subject(subject, proficiency)
        except TutoringError as e:
            raise e.with_context(ErrorContext.REGISTER_TUTOR) from e

        logger.info("tutors.subject_added", email=email, subject=subject)

    def add_schedule(self, email: str, time: str, day: str) -> None:
        try:
            tutor = self.get_tutor(email)
            tutor.add_schedule(time, day)
        except TutoringError as e:
            raise e.with_context(ErrorContext.RECORD_SCHEDULE) from e

        logger.debug("tutors.schedule_added", email=email, day=day, time=time)

    def add_location(self, email: str, location: str) -> None:
        try:
            tutor = self.get_tutor(email)
            tutor.add_location(location)
        except TutoringError as e:
            raise e.with_context(ErrorContext.RECORD_LOCATION) from e

        logger.debug("tutors.location_added", email=email, location=location)

    def has_schedule(self, email: str, time: str, day: str) -> bool:
        """Whether the tutor attends at ``day``/``time``.

        An unknown tutor is a plain ``False``; blank inputs still raise.
        """
        try:
            require_non_blank_text(email, "Email cannot be blank")
            _require_slot(time, day)
        except TutoringError as e:
            raise e.with_context(ErrorContext.RECORD_SCHEDULE) from e

        if not self.exists(email):
            return False
        return self.lookup(email).has_schedule(time, day)

    def has_location(self, email: str, location: str) -> bool:
        """Whether the tutor attends at ``location``.

        An unknown tutor is a plain ``False``; blank inputs still raise.
        """
        try:
            require_non_blank_text(email, "Email cannot be blank")
            require_non_blank_text(location, "Location cannot be blank")
        except TutoringError as e:
            raise e.with_context(ErrorContext.RECORD_LOCATION) from e

        if not self.exists(email):
            return False
        return self.lookup(email).has_location(location)

    def describe(self, email: str) -> str:
        try:
            return str(self.get_tutor(email))
        except TutoringError as e:
            raise e.with_context(ErrorContext.LOOKUP_TUTOR) from e

    def rating_of(self, email: str) -> str:
        """Rating formatted with two decimals, e.g. ``"4.00"``."""
        try:
            return f"{self.get_tutor(email).rating:.2f}"
        except TutoringError as e:
            raise e.with_context(ErrorContext.LOOKUP_TUTOR) from e

    def tier_of(self, email: str) -> Tier:
        try:
            return self.get_tutor(email).tier
        except TutoringError as e:
            raise e.with_context(ErrorContext.LOOKUP_TUTOR) from e

    def total_money(self, email: str) -> int:
        """Accrued donations for the tutor, in cents."""
        try:
            return self.get_tutor(email).balance
        except TutoringError as e:
            raise e.with_context(ErrorContext.TUTOR_MONEY) from e
