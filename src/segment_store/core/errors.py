"""Exception hierarchy for the segment store.

Defines all custom exceptions used throughout the implementation.
"""

from __future__ import annotations


class SegmentStoreError(Exception):
    """Base exception for all segment store errors."""
    pass


class CatalogBuildError(SegmentStoreError):
    """Raised when the catalog cannot be built from disk.

    Fatal: no partial catalog is ever returned.
    """
    pass


class PartitionReadError(SegmentStoreError):
    """Raised when reading a partition fails."""
    pass


class CorruptPartitionError(PartitionReadError):
    """Raised when a partition or its index is malformed."""
    pass


class ValueDecodeError(PartitionReadError):
    """Raised when a stored value cannot be decoded to text."""
    pass
