"""Common type definitions for the segment store.

Defines the key/value primitives and the tagged lookup result.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

# Core primitive types
Key = bytes
Value = str
HashFunction = Callable[[bytes], int]
IndexEntry = tuple[Key, int]


class MissReason(Enum):
    """Why a lookup produced no value."""

    UNKNOWN_COLLECTION = "unknown_collection"
    UNKNOWN_SEGMENT = "unknown_segment"
    KEY_NOT_FOUND = "key_not_found"


@dataclass(frozen=True)
class Found:
    """Lookup succeeded; ``value`` may legitimately be empty."""

    value: Value


@dataclass(frozen=True)
class NotFound:
    """Lookup completed without a value."""

    reason: MissReason = MissReason.KEY_NOT_FOUND


@dataclass(frozen=True)
class Failure:
    """Lookup could not complete because of an I/O or decoding error."""

    reason: str
    error: Exception | None = None


LookupResult = Found | NotFound | Failure
