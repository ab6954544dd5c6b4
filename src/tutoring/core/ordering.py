"""Listing order options and the comparators behind them.

OrderBy is the closed set of attribute names the dispatcher may pass
around (listing order, student info, help request fields). Only
NAME, REGISTRATION_ID and EMAIL are valid listing orders.

Sort keys always end with the registration id, so two records with
the same primary attribute still list in a stable, deterministic order.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Protocol

from tutoring.core.errors import InvalidArgumentError


class Person(Protocol):
    """Anything listable: a Student or a TutorProfile."""

    @property
    def registration_id(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def email(self) -> str: ...


class OrderBy(Enum):
    """Closed set of attribute names accepted by the dispatcher."""

    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    REGISTRATION_ID = "registrationId"
    SUBJECT = "subject"
    LOCATION = "location"
    SCHEDULE = "schedule"
    DAY = "day"

    @classmethod
    def parse(cls, value: str | OrderBy) -> OrderBy:
        """Resolve a user-supplied attribute name (case-insensitive)."""
        if isinstance(value, OrderBy):
            return value
        if value is None:
            raise InvalidArgumentError("Invalid option: None")
        wanted = str(value).strip().lower()
        for option in cls:
            if option.value.lower() == wanted:
                return option
        raise InvalidArgumentError(f"Invalid option: {value!r}")


LISTING_ORDERS = (OrderBy.NAME, OrderBy.REGISTRATION_ID, OrderBy.EMAIL)

SortKey = Callable[[Person], tuple]


def _by_name(person: Person) -> tuple:
    return (person.name, person.registration_id)


def _by_registration_id(person: Person) -> tuple:
    return (person.registration_id,)


def _by_email(person: Person) -> tuple:
    return (person.email, person.registration_id)


_SORT_KEYS: dict[OrderBy, SortKey] = {
    OrderBy.NAME: _by_name,
    OrderBy.REGISTRATION_ID: _by_registration_id,
    OrderBy.EMAIL: _by_email,
}


def sort_key_for(order: str | OrderBy) -> SortKey:
    """Return the listing sort key for ``order``.

    Raises:
        InvalidArgumentError: If ``order`` is unknown or not a listing order.
    """
    try:
        option = OrderBy.parse(order)
    except InvalidArgumentError:
        raise InvalidArgumentError("Invalid order") from None

    if option not in _SORT_KEYS:
        raise InvalidArgumentError("Invalid order")
    return _SORT_KEYS[option]
