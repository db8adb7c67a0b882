"""
Business entities representing core domain concepts.

Entities are mutable objects with identity that persist over time.
They encapsulate business rules and behavior.

Exports:
- CanonicalRecord: Deduplicated, merged representation of a title
- SearchIndexEntry: Narrow projection of a record for the search store
- DuplicateGroup: Records sharing an identity key, pending merge
- IdentityKey / normalize_title: Exact-match duplicate key
"""

from src.core.entities.record import (
    CanonicalRecord,
    DuplicateGroup,
    IdentityKey,
    SearchIndexEntry,
    normalize_title,
)

__all__ = [
    "CanonicalRecord",
    "DuplicateGroup",
    "IdentityKey",
    "SearchIndexEntry",
    "normalize_title",
]
