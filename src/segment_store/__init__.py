"""Segment Store - read-only lookups over hash-partitioned, sorted segment files."""

from .core.catalog import SegmentCatalog, build_catalog
from .core.config import SegmentStoreConfig
from .core.errors import (
    SegmentStoreError,
    CatalogBuildError,
    PartitionReadError,
    CorruptPartitionError,
    ValueDecodeError,
)
from .core.types import Key, Value, Found, NotFound, Failure, LookupResult, MissReason

__all__ = [
    "SegmentCatalog",
    "build_catalog",
    "SegmentStoreConfig",
    "SegmentStoreError",
    "CatalogBuildError",
    "PartitionReadError",
    "CorruptPartitionError",
    "ValueDecodeError",
    "Key",
    "Value",
    "Found",
    "NotFound",
    "Failure",
    "LookupResult",
    "MissReason",
]
