"""Donation splitter: divide donations between tutor and platform.

The tutor's current tier selects the share the tutor keeps (configured
per tier). The platform share is rounded up to the next cent and the
tutor gets the rest, so the two always add up to the donation:

    platform = ceil((1 - rate) * total)
    tutor    = total - platform

The splitter owns the process-wide platform revenue counter. It only
grows, except through ``reset()``, which is reserved for the
"clear all data" operation.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from decimal import Decimal

import structlog

from tutoring.config.app_config import DonationConfig
from tutoring.core.errors import ErrorContext, InvalidArgumentError, TutoringError
from tutoring.core.reputation import Tier
from tutoring.core.tutors import TutorDirectory, TutorProfile
from tutoring.utils.validators import require_non_blank_text, require_positive

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DonationSplit:
    """Outcome of one donation, in cents."""

    total: int
    tutor_share: int
    platform_share: int
    tutor_rate: float
    tier: Tier


def split_amount(total: int, tutor_rate: float) -> tuple[int, int]:
    """Return ``(tutor_share, platform_share)`` for ``total`` cents.

    Decimal arithmetic keeps rates like 0.7 from rounding a whole cent
    the wrong way.
    """
    platform_share = math.ceil((Decimal(1) - Decimal(str(tutor_rate))) * total)
    return total - platform_share, platform_share


class DonationSplitter:
    """Splits donations and accumulates the platform's revenue."""

    def __init__(self, config: DonationConfig | None = None):
        self._config = config or DonationConfig()
        self._revenue = 0
        self._lock = threading.Lock()

    @property
    def revenue(self) -> int:
        """Platform revenue accumulated since the last reset, in cents."""
        return self._revenue

    def rate_for(self, tutor: TutorProfile) -> float:
        """Share of a donation ``tutor`` keeps at their current tier."""
        return self._config.rate_for(tutor.tier)

    def split(self, tutor: TutorProfile, total: int) -> DonationSplit:
        """Credit ``tutor`` and the platform with their shares of ``total``.

        Raises:
            InvalidArgumentError: If ``total`` is not a positive integer.
        """
        if isinstance(total, bool) or not isinstance(total, int):
            raise InvalidArgumentError("Donation must be a whole number of cents")
        require_positive(total, "Donation must be positive")

        tier = tutor.tier
        rate = self._config.rate_for(tier)
        tutor_share, platform_share = split_amount(total, rate)

        with self._lock:
            tutor.credit(tutor_share)
            self._revenue += platform_share

        logger.info(
            "donations.split",
            email=tutor.email,
            total=total,
            tutor_share=tutor_share,
            platform_share=platform_share,
            tier=tier.value,
        )
        return DonationSplit(
            total=total,
            tutor_share=tutor_share,
            platform_share=platform_share,
            tutor_rate=rate,
            tier=tier,
        )

    def donate(self, directory: TutorDirectory, email: str, total: int) -> DonationSplit:
        """Donate ``total`` cents to the tutor registered under ``email``.

        Raises:
            InvalidArgumentError: On a blank email or a non-positive amount.
            NotFoundError: If no tutor is registered under ``email``.
        """
        try:
            require_non_blank_text(email, "Email cannot be blank")
            tutor = directory.lookup(email)
            return self.split(tutor, total)
        except TutoringError as e:
            raise e.with_context(ErrorContext.DONATE) from e

    def tutor_rate(self, directory: TutorDirectory, email: str) -> float:
        try:
            return self.rate_for(directory.get_tutor(email))
        except TutoringError as e:
            raise e.with_context(ErrorContext.LOOKUP_TUTOR) from e

    def restore(self, revenue: int) -> None:
        """Seed the counter from a persisted snapshot."""
        if isinstance(revenue, bool) or not isinstance(revenue, int) or revenue < 0:
            raise InvalidArgumentError("Revenue must be a non-negative integer")
        with self._lock:
            self._revenue = revenue

    def reset(self) -> None:
        with self._lock:
            previous = self._revenue
            self._revenue = 0
        logger.info("donations.revenue_reset", previous=previous)
