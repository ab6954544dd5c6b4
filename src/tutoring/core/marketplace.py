"""Marketplace facade: the entry points the dispatcher calls.

Ties the student directory, tutor directory, matching engine,
reputation engine, donation splitter and listing store together.
Students are addressed by registration id, tutors by email, mirroring
how the two directories are keyed.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from tutoring.config.app_config import AppConfig, load_app_config
from tutoring.core.donations import DonationSplit, DonationSplitter
from tutoring.core.errors import ErrorContext, TutoringError
from tutoring.core.matching import find_tutor_for_in_person_request, find_tutor_for_online_request
from tutoring.core.ordering import OrderBy
from tutoring.core.reputation import Tier, record_rating
from tutoring.core.students import Student, StudentDirectory
from tutoring.core.tutors import TutorDirectory, TutorProfile
from tutoring.db.listing_store import ListingStore

logger = structlog.get_logger(__name__)


class Marketplace:
    """Peer-tutoring marketplace."""

    def __init__(self, config: AppConfig | None = None, store: ListingStore | None = None):
        self.config = config or load_app_config()
        self.students = StudentDirectory(self.config.listing.default_order)
        self.tutors = TutorDirectory(self.config.listing.default_order)
        self.donations = DonationSplitter(self.config.donations)
        self.store = store or ListingStore(self.config.state_dir)

    # -- students ------------------------------------------------------------

    def register_student(
        self, name: str, registration_id: str, course_code: int, phone: str, email: str
    ) -> Student:
        return self.students.register_student(name, registration_id, course_code, phone, email)

    def describe_student(self, registration_id: str) -> str:
        return str(self.students.get_student(registration_id))

    def student_info(self, registration_id: str, attribute: str | OrderBy) -> str:
        return self.students.student_info(registration_id, attribute)

    def list_students(self) -> str:
        return self.students.render()

    # -- tutors --------------------------------------------------------------

    def become_tutor(self, registration_id: str, subject: str, proficiency: int) -> TutorProfile:
        """Promote a student to tutor, or add a subject if already a tutor.

        Raises:
            NotFoundError: If the student does not exist.
            InvalidArgumentError: On bad subject/proficiency or a subject
                the tutor already teaches.
        """
        try:
            student = self.students.get_student(registration_id)
        except TutoringError as e:
            raise e.with_context(ErrorContext.REGISTER_TUTOR) from e

        if self.tutors.exists(student.email):
            self.tutors.add_subject(student.email, subject, proficiency)
            return self.tutors.lookup(student.email)
        return self.tutors.register_tutor(subject, proficiency, student)

    def get_tutor_by_registration(self, registration_id: str) -> TutorProfile:
        """Resolve a tutor from the wrapped student's registration id."""
        try:
            student = self.students.get_student(registration_id)
            return self.tutors.get_tutor(student.email)
        except TutoringError as e:
            raise e.with_context(ErrorContext.LOOKUP_TUTOR) from e

    def describe_tutor(self, registration_id: str) -> str:
        return str(self.get_tutor_by_registration(registration_id))

    def list_tutors(self) -> str:
        return self.tutors.render()

    def add_schedule(self, email: str, time: str, day: str) -> None:
        self.tutors.add_schedule(email, time, day)

    def add_location(self, email: str, location: str) -> None:
        self.tutors.add_location(email, location)

    def has_schedule(self, email: str, time: str, day: str) -> bool:
        return self.tutors.has_schedule(email, time, day)

    def has_location(self, email: str, location: str) -> bool:
        return self.tutors.has_location(email, location)

    # -- help requests -------------------------------------------------------

    def find_tutor_in_person(
        self, subject: str, time: str, day: str, location: str
    ) -> TutorProfile | None:
        return find_tutor_for_in_person_request(self.tutors, subject, time, day, location)

    def find_tutor_online(self, subject: str) -> TutorProfile | None:
        return find_tutor_for_online_request(self.tutors, subject)

    # -- reputation ----------------------------------------------------------

    def rate_tutor(self, email: str, score: float) -> TutorProfile:
        return record_rating(self.tutors, email, score)

    def rating_of(self, email: str) -> str:
        return self.tutors.rating_of(email)

    def tier_of(self, email: str) -> Tier:
        return self.tutors.tier_of(email)

    # -- money ---------------------------------------------------------------

    def donate(self, email: str, total_cents: int) -> DonationSplit:
        return self.donations.donate(self.tutors, email, total_cents)

    def total_money(self, email: str) -> int:
        return self.tutors.total_money(email)

    def tutor_rate(self, email: str) -> float:
        return self.donations.tutor_rate(self.tutors, email)

    def system_revenue(self) -> int:
        return self.donations.revenue

    # -- ordering ------------------------------------------------------------

    def configure_order(self, order: str | OrderBy) -> None:
        """Apply a listing order to both directories.

        Raises:
            InvalidArgumentError: Unless ``order`` is name, registrationId or email.
        """
        try:
            self.students.configure_order(order)
            self.tutors.configure_order(order)
        except TutoringError as e:
            raise e.with_context(ErrorContext.CONFIGURE_ORDER) from e

        logger.info("marketplace.order_configured", order=self.students.order.value)

    # -- persistence ---------------------------------------------------------

    def save(self) -> tuple[Path, Path]:
        """Write both listings through the listing store."""
        students_path = self.store.save_students(self.list_students())
        tutors_path = self.store.save_tutors(self.list_tutors())
        return students_path, tutors_path

    def load_students_listing(self) -> str:
        return self.store.load_students()

    def load_tutors_listing(self) -> str:
        return self.store.load_tutors()

    def clear(self) -> None:
        """Drop every record, reset platform revenue and clear the store."""
        self.tutors.clear()
        self.students.clear()
        self.donations.reset()
        self.store.clear()
        logger.info("marketplace.cleared")
