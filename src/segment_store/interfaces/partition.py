"""Protocol definitions for partition readers."""

from __future__ import annotations
from typing import Protocol, Iterator
from ..core.types import Key, LookupResult


class PartitionLookup(Protocol):
    """Protocol for reading from one immutable sorted partition."""

    def lookup(self, key: Key) -> LookupResult:
        """Return Found, NotFound or Failure; never raises for runtime errors."""
        ...

    def iter_records(self) -> Iterator[tuple[Key, bytes]]:
        """Iterate (key, raw value) pairs in key order."""
        ...

    def close(self) -> None:
        """Release file descriptors."""
        ...
