"""Keyed registry shared by the student and tutor directories.

A Directory owns a ``key -> entity`` mapping, rejects duplicate keys,
fails on lookup misses and lists its entities in the order selected by
``configure_order``.
"""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

import structlog

from tutoring.core.errors import AlreadyExistsError, NotFoundError
from tutoring.core.ordering import OrderBy, sort_key_for

logger = structlog.get_logger(__name__)

E = TypeVar("E")

LISTING_SEPARATOR = ", "


class Directory(Generic[E]):
    """In-memory registry keyed by a unique string."""

    kind = "entity"

    def __init__(self, order: str | OrderBy = OrderBy.NAME):
        self._entries: dict[str, E] = {}
        self._order = OrderBy.NAME
        self._sort_key = sort_key_for(OrderBy.NAME)
        self.configure_order(order)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[E]:
        return iter(self._entries.values())

    @property
    def order(self) -> OrderBy:
        return self._order

    def exists(self, key: str) -> bool:
        return key in self._entries

    def register(self, key: str, entity: E) -> E:
        """Add ``entity`` under ``key``.

        Raises:
            AlreadyExistsError: If ``key`` is already registered.
        """
        if key in self._entries:
            raise AlreadyExistsError(f"{self.kind} already registered")
        self._entries[key] = entity
        logger.debug("directory.registered", kind=self.kind, key=key)
        return entity

    def lookup(self, key: str) -> E:
        """Return the entity under ``key``.

        Raises:
            NotFoundError: If ``key`` was never registered.
        """
        try:
            return self._entries[key]
        except KeyError:
            raise NotFoundError(f"{self.kind} not found") from None

    def configure_order(self, order: str | OrderBy) -> None:
        """Select the listing order: name, registrationId or email.

        Raises:
            InvalidArgumentError: For any other value.
        """
        self._sort_key = sort_key_for(order)
        self._order = OrderBy.parse(order)
        logger.debug("directory.order_configured", kind=self.kind, order=self._order.value)

    def list(self) -> list[E]:
        """Entities sorted by the configured order."""
        return sorted(self._entries.values(), key=self._sort_key)

    def render(self) -> str:
        """Text listing: each entity's rendering joined by ``", "``."""
        return LISTING_SEPARATOR.join(str(entity) for entity in self.list())

    def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        logger.info("directory.cleared", kind=self.kind, removed=count)
