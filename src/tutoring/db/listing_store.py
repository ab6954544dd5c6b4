"""Flat-file store for student and tutor listings.

The store treats listings as opaque text: whatever the directories
render is written as-is and read back verbatim. Files live under the
state directory:

- students.txt
- tutors.txt
"""

from __future__ import annotations

from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

# Default store location
DEFAULT_STATE_DIR = Path("data/state")

STUDENTS_FILENAME = "students.txt"
TUTORS_FILENAME = "tutors.txt"


class ListingStore:
    """save/load/clear round-trips of listing text."""

    def __init__(self, state_dir: Path | None = None):
        self.state_dir = state_dir or DEFAULT_STATE_DIR

    @property
    def students_path(self) -> Path:
        return self.state_dir / STUDENTS_FILENAME

    @property
    def tutors_path(self) -> Path:
        return self.state_dir / TUTORS_FILENAME

    def save_students(self, listing: str) -> Path:
        return self._save(self.students_path, listing)

    def save_tutors(self, listing: str) -> Path:
        return self._save(self.tutors_path, listing)

    def load_students(self) -> str:
        return self._load(self.students_path)

    def load_tutors(self) -> str:
        return self._load(self.tutors_path)

    def clear(self) -> None:
        """Remove both listing files, if present."""
        for path in (self.students_path, self.tutors_path):
            if path.exists():
                path.unlink()
                logger.info("listing_store.cleared", path=str(path))

    def _save(self, path: Path, listing: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(listing, encoding="utf-8")
        logger.info("listing_store.saved", path=str(path), size=len(listing))
        return path

    def _load(self, path: Path) -> str:
        if not path.exists():
            logger.debug("listing_store.not_found", path=str(path))
            return ""
        return path.read_text(encoding="utf-8")
