"""Sparse index for partition files.

Holds periodic (key, offset) samples of a sorted data file so a lookup can
seek close to its key before scanning.
"""

from __future__ import annotations

import struct
from pathlib import Path

from ..core.errors import CorruptPartitionError
from ..core.types import IndexEntry, Key

# Index file format: [magic (4B)] then entries of [key_len (8B)][key][offset (8B)]
INDEX_MAGIC = b"SGI1"
_U64 = struct.Struct("<Q")


class SparseIndex:
    """In-memory sparse index for one partition.

    Args:
        index_entries: List of (key, offset) tuples in ascending key order

    Invariants:
        - Entries are sorted by key bytes
        - Immutable after construction
    """

    def __init__(self, index_entries: list[IndexEntry]):
        for (prev_key, _), (key, _) in zip(index_entries, index_entries[1:]):
            if key < prev_key:
                raise CorruptPartitionError(
                    f"Index keys out of order: {prev_key!r} > {key!r}"
                )
        self._index = list(index_entries)

    def __len__(self) -> int:
        return len(self._index)

    def find_block_offset(self, key: Key, default: int = 0) -> int:
        """Return the file offset to start scanning from for this key.

        Returns the offset of the largest index key <= search key, or
        ``default`` if the key sorts before every indexed key.
        """
        if not self._index:
            return default

        # Binary search
        left, right = 0, len(self._index) - 1
        result_offset = default

        while left <= right:
            mid = (left + right) // 2
            idx_key, idx_offset = self._index[mid]

            if idx_key <= key:
                result_offset = idx_offset
                left = mid + 1
            else:
                right = mid - 1

        return result_offset

    def check_offsets(self, low: int, high: int) -> None:
        """Ensure every sampled offset lies within ``[low, high]``."""
        for key, offset in self._index:
            if not low <= offset <= high:
                raise CorruptPartitionError(
                    f"Index offset {offset} for {key!r} outside data file range [{low}, {high}]"
                )

    @classmethod
    def load(cls, path: str | Path) -> SparseIndex:
        """Read an index file fully into memory."""
        data = Path(path).read_bytes()
        if data[:len(INDEX_MAGIC)] != INDEX_MAGIC:
            raise CorruptPartitionError(f"Bad index magic in {path}")

        entries: list[IndexEntry] = []
        pos = len(INDEX_MAGIC)
        end = len(data)
        while pos < end:
            if pos + 8 > end:
                raise CorruptPartitionError(f"Truncated index entry in {path} at {pos}")
            (key_len,) = _U64.unpack_from(data, pos)
            pos += 8
            if pos + key_len + 8 > end:
                raise CorruptPartitionError(f"Truncated index entry in {path} at {pos}")
            key = data[pos:pos + key_len]
            pos += key_len
            (offset,) = _U64.unpack_from(data, pos)
            pos += 8
            entries.append((key, offset))

        return cls(entries)
