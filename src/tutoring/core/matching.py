"""Matching engine: pick the best available tutor for a help request.

Matching is a pure query over the tutor directory. Hard constraints
filter the candidates (subject, then attendance slot and location for
in-person requests); survivors are ranked by the best-match key and the
first one wins. An empty survivor set yields ``None``, not an error.

Best-match key, in order:
1. higher rating first
2. smaller registration id (string order)
3. smaller email
"""

from __future__ import annotations

from typing import Callable, Iterable

import structlog

from tutoring.core.errors import ErrorContext, TutoringError
from tutoring.core.tutors import TutorDirectory, TutorProfile
from tutoring.utils.validators import require_non_blank_text

logger = structlog.get_logger(__name__)

TutorFilter = Callable[[TutorProfile], bool]


def best_match_key(tutor: TutorProfile) -> tuple:
    return (-tutor.rating, tutor.registration_id, tutor.email)


def rank_candidates(tutors: Iterable[TutorProfile]) -> list[TutorProfile]:
    """Sort candidates best first."""
    return sorted(tutors, key=best_match_key)


def _select(tutors: Iterable[TutorProfile], filters: list[TutorFilter]) -> TutorProfile | None:
    candidates = list(tutors)
    for keep in filters:
        candidates = [t for t in candidates if keep(t)]
        if not candidates:
            return None
    return rank_candidates(candidates)[0]


def find_tutor_for_in_person_request(
    directory: TutorDirectory,
    subject: str,
    time: str,
    day: str,
    location: str,
) -> TutorProfile | None:
    """Best tutor teaching ``subject`` who attends at ``day``/``time`` in ``location``.

    Raises:
        InvalidArgumentError: If any argument is blank.
    """
    try:
        require_non_blank_text(subject, "Subject cannot be blank")
        require_non_blank_text(time, "Time cannot be blank")
        require_non_blank_text(day, "Day cannot be blank")
        require_non_blank_text(location, "Location cannot be blank")
    except TutoringError as e:
        raise e.with_context(ErrorContext.IN_PERSON_HELP) from e

    tutor = _select(
        directory,
        [
            lambda t: t.has_subject(subject),
            lambda t: t.has_schedule(time, day),
            lambda t: t.has_location(location),
        ],
    )
    logger.debug(
        "matching.in_person",
        subject=subject,
        day=day,
        time=time,
        location=location,
        match=tutor.email if tutor else None,
    )
    return tutor


def find_tutor_for_online_request(directory: TutorDirectory, subject: str) -> TutorProfile | None:
    """Best tutor teaching ``subject``; schedule and location are ignored."""
    try:
        require_non_blank_text(subject, "Subject cannot be blank")
    except TutoringError as e:
        raise e.with_context(ErrorContext.ONLINE_HELP) from e

    tutor = _select(directory, [lambda t: t.has_subject(subject)])
    logger.debug("matching.online", subject=subject, match=tutor.email if tutor else None)
    return tutor
