"""Precondition guards shared by every component.

Each guard takes a value and the message to use on failure, returns the
value unchanged when it is valid and raises a typed error otherwise.
Guards are pure: callers run them before touching any state so that a
failed validation never leaves a partial mutation behind.

Functions:
- require_non_blank_text(text, message) -> str
- require_in_range(value, low, high, message) -> number
- require_positive(value, message) -> number
- require_non_negative(value, message) -> number
- require_not_null(obj, message) -> obj
- require_email(email, message) -> str
"""

from __future__ import annotations

import re
from typing import TypeVar

from tutoring.core.errors import InvalidArgumentError, NullReferenceError

T = TypeVar("T")

EMAIL_PATTERN = re.compile(
    r"^[_A-Za-z0-9+-]+(\.[_A-Za-z0-9-]+)*@[A-Za-z0-9-]+(\.[A-Za-z0-9]+)*(\.[A-Za-z]{2,})$"
)


def require_non_blank_text(text: str | None, message: str) -> str:
    """Fail if ``text`` is None, empty or whitespace-only."""
    if text is None or not str(text).strip():
        raise InvalidArgumentError(message)
    return text


def require_in_range(value: float | None, low: float, high: float, message: str) -> float:
    """Fail unless ``value`` is a number in the closed interval [low, high].

    Booleans are not numbers here, even though ``True == 1``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(message)
    if not low <= value <= high:
        raise InvalidArgumentError(message)
    return value


def require_positive(value: float | None, message: str) -> float:
    if value is None or value <= 0:
        raise InvalidArgumentError(message)
    return value


def require_non_negative(value: float | None, message: str) -> float:
    if value is None or value < 0:
        raise InvalidArgumentError(message)
    return value


def require_not_null(obj: T | None, message: str) -> T:
    """Fail with NullReferenceError when a required reference is absent."""
    if obj is None:
        raise NullReferenceError(message)
    return obj


def require_email(email: str | None, message: str) -> str:
    """Fail unless ``email`` is non-blank and looks like an address."""
    require_non_blank_text(email, message)
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
        raise InvalidArgumentError(message)
    return email
