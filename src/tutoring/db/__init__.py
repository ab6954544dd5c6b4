"""Persistence for listing exports.

Provides:
- ListingStore: save/load/clear of student and tutor listing text
"""

from tutoring.db.listing_store import ListingStore

__all__ = ["ListingStore"]
