"""Typed error kinds shared by the tutoring core.

Every failure raised by the core is a TutoringError subclass. Composed
operations re-raise inner failures with extra context using
``with_context``, which keeps the original class so callers can still
catch by kind.

Usage:
    try:
        directory.lookup(email)
    except NotFoundError as e:
        raise e.with_context(ErrorContext.RATE_TUTOR) from e
"""

from __future__ import annotations

from enum import Enum


class ErrorContext(str, Enum):
    """Prefixes describing which higher-level operation was in progress."""

    REGISTER_STUDENT = "Error registering student: "
    LOOKUP_STUDENT = "Error looking up student: "
    STUDENT_INFO = "Error reading student info: "
    REGISTER_TUTOR = "Error registering tutor: "
    LOOKUP_TUTOR = "Error looking up tutor: "
    RECORD_SCHEDULE = "Error recording schedule: "
    RECORD_LOCATION = "Error recording location: "
    RATE_TUTOR = "Error rating tutor: "
    DONATE = "Error donating to tutor: "
    TUTOR_MONEY = "Error reading tutor balance: "
    ONLINE_HELP = "Error in online help request: "
    IN_PERSON_HELP = "Error in in-person help request: "
    CONFIGURE_ORDER = "Error configuring order: "

    def __str__(self) -> str:
        return self.value


class TutoringError(Exception):
    """Base class for all tutoring core failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def with_context(self, context: str | ErrorContext) -> TutoringError:
        """Return a copy of this error, same kind, with ``context`` prepended."""
        return type(self)(f"{context}{self.message}")


class InvalidArgumentError(TutoringError, ValueError):
    """Malformed or out-of-range input, blank text, bad option."""


class NotFoundError(TutoringError, LookupError):
    """Lookup by key missed."""


class AlreadyExistsError(TutoringError, ValueError):
    """Duplicate registration."""


class NullReferenceError(TutoringError, TypeError):
    """A required object reference was missing."""
