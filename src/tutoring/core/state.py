"""Structured marketplace snapshot.

The CLI is stateless between invocations, so the whole marketplace is
persisted as JSON alongside the listing files:

- data/state/marketplace_v1.json

Tiers are never written; they are re-derived from the rating on load.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from tutoring.config.app_config import AppConfig
from tutoring.core.errors import InvalidArgumentError, TutoringError
from tutoring.core.marketplace import Marketplace
from tutoring.core.students import Student
from tutoring.core.tutors import TutorProfile
from tutoring.db.listing_store import ListingStore

logger = structlog.get_logger(__name__)

STATE_SCHEMA = "marketplace_v1"
STATE_FILENAME = "marketplace_v1.json"


def marketplace_to_dict(marketplace: Marketplace) -> dict[str, Any]:
    """Convert to dictionary for JSON serialization."""
    return {
        "$schema": STATE_SCHEMA,
        "order": marketplace.students.order.value,
        "revenue": marketplace.system_revenue(),
        "students": [s.to_dict() for s in marketplace.students],
        "tutors": [t.to_dict() for t in marketplace.tutors],
    }


def _fresh_marketplace(config: AppConfig | None, data_dir: Path) -> Marketplace:
    return Marketplace(config=config, store=ListingStore(data_dir / "state"))


def load_marketplace_state(
    data_dir: Path | None = None,
    config: AppConfig | None = None,
) -> Marketplace:
    """Load the marketplace from disk, or return a fresh one.

    Args:
        data_dir: Base data directory. Defaults to ./data
        config: Configuration to build the marketplace with.

    Returns:
        Marketplace (fresh if file missing or corrupted)
    """
    if data_dir is None:
        data_dir = Path("data")

    state_path = data_dir / "state" / STATE_FILENAME
    marketplace = _fresh_marketplace(config, data_dir)

    if not state_path.exists():
        logger.debug("marketplace_state_not_found", path=str(state_path))
        return marketplace

    try:
        with open(state_path, encoding="utf-8") as f:
            data = json.load(f)

        if data.get("$schema") != STATE_SCHEMA:
            logger.warning(
                "marketplace_state_invalid_schema",
                expected=STATE_SCHEMA,
                got=data.get("$schema"),
            )
            return marketplace

        for s_data in data.get("students", []):
            student = Student.from_dict(s_data)
            marketplace.students.register(student.registration_id, student)

        for t_data in data.get("tutors", []):
            student = marketplace.students.lookup(t_data["registration_id"])
            tutor = TutorProfile.from_dict(t_data, student)
            marketplace.tutors.register(student.email, tutor)

        marketplace.donations.restore(int(data.get("revenue", 0)))
        if data.get("order"):
            try:
                marketplace.configure_order(data["order"])
            except InvalidArgumentError:
                logger.warning(
                    "marketplace_state_invalid_order",
                    order=data["order"],
                    kept=marketplace.students.order.value,
                )

        return marketplace

    except (json.JSONDecodeError, OSError, KeyError, ValueError, TypeError, TutoringError) as e:
        logger.error("marketplace_state_load_failed", error=str(e))
        return _fresh_marketplace(config, data_dir)


def save_marketplace_state(marketplace: Marketplace, data_dir: Path | None = None) -> Path:
    """Persist the marketplace to disk.

    Args:
        marketplace: Marketplace to save
        data_dir: Base data directory. Defaults to ./data

    Returns:
        Path to saved state file
    """
    if data_dir is None:
        data_dir = Path("data")

    state_dir = data_dir / "state"
    state_dir.mkdir(parents=True, exist_ok=True)
    state_path = state_dir / STATE_FILENAME

    with open(state_path, "w", encoding="utf-8") as f:
        json.dump(marketplace_to_dict(marketplace), f, indent=2, ensure_ascii=False)

    logger.info("marketplace_state_saved", path=str(state_path))
    return state_path


def delete_marketplace_state(data_dir: Path | None = None) -> bool:
    """Remove the snapshot file. Returns True if a file was removed."""
    if data_dir is None:
        data_dir = Path("data")

    state_path = data_dir / "state" / STATE_FILENAME
    if not state_path.exists():
        return False
    state_path.unlink()
    logger.info("marketplace_state_deleted", path=str(state_path))
    return True
