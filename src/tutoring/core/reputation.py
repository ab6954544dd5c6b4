"""Reputation engine: incremental rating update and tier derivation.

A tutor's rating is a weighted moving average. Each new score counts
as one observation against a rolling history of five:

    rating' = (rating * 5 + score) / 6

Tiers are a pure function of the rating and are re-derived on every
read, so they can never drift from it:

    Apprentice   rating <= 3.0
    Tutor        3.0 < rating <= 4.5
    Top          rating > 4.5

New tutors start at 4.0, i.e. in the Tutor tier.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

from tutoring.core.errors import ErrorContext, TutoringError
from tutoring.utils.validators import require_in_range, require_non_blank_text

if TYPE_CHECKING:
    from tutoring.core.tutors import TutorDirectory, TutorProfile

logger = structlog.get_logger(__name__)

INITIAL_RATING = 4.0
HISTORY_WEIGHT = 5
MIN_SCORE = 0
MAX_SCORE = 5
APPRENTICE_CEILING = 3.0
TUTOR_CEILING = 4.5


class Tier(Enum):
    """Reputation tier derived from a tutor's rating."""

    APPRENTICE = "Apprentice"
    TUTOR = "Tutor"
    TOP = "Top"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str | Tier) -> Tier:
        if isinstance(value, Tier):
            return value
        wanted = str(value).strip().lower()
        for tier in cls:
            if tier.value.lower() == wanted or tier.name.lower() == wanted:
                return tier
        raise ValueError(f"Unknown tier: {value!r}")


def tier_for_rating(rating: float) -> Tier:
    if rating <= APPRENTICE_CEILING:
        return Tier.APPRENTICE
    if rating <= TUTOR_CEILING:
        return Tier.TUTOR
    return Tier.TOP


def updated_rating(rating: float, score: float) -> float:
    """Fold ``score`` into ``rating`` with the 5/6 history weight."""
    require_in_range(score, MIN_SCORE, MAX_SCORE, "Score must be between 0 and 5")
    return (rating * HISTORY_WEIGHT + score) / (HISTORY_WEIGHT + 1)


def record_rating(directory: TutorDirectory, email: str, score: float) -> TutorProfile:
    """Rate the tutor registered under ``email``.

    Validation happens before anything is touched: a blank email or an
    out-of-range score raises InvalidArgumentError, an unknown email
    raises NotFoundError, both prefixed with the rating context.

    Returns:
        The updated TutorProfile.
    """
    try:
        require_non_blank_text(email, "Email cannot be blank")
        require_in_range(score, MIN_SCORE, MAX_SCORE, "Score must be between 0 and 5")
        tutor = directory.lookup(email)
    except TutoringError as e:
        raise e.with_context(ErrorContext.RATE_TUTOR) from e

    previous_tier = tutor.tier
    tutor.apply_rating(score)

    logger.info(
        "reputation.rating_recorded",
        email=email,
        score=score,
        rating=round(tutor.rating, 4),
    )
    if tutor.tier is not previous_tier:
        logger.info(
            "reputation.tier_changed",
            email=email,
            previous=previous_tier.value,
            current=tutor.tier.value,
        )
    return tutor
