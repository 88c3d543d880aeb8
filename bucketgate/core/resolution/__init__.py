"""
Object resolution logic.

Contains the lookup result types, the backend interface, and the ordered
fallback resolver.
"""

from .models import (
    BucketList,
    Found,
    LookupResult,
    Miss,
    MissReason,
    StorageBackend,
)
from .resolver import ResolutionCancelled, key_from_path, resolve

__all__ = [
    "BucketList",
    "Found",
    "LookupResult",
    "Miss",
    "MissReason",
    "StorageBackend",
    "ResolutionCancelled",
    "key_from_path",
    "resolve",
]
