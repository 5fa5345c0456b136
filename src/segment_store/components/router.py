"""Partition routing.

Maps a key to the partition that the writer placed it in. The hash must
reproduce the write-time partitioner bit-for-bit; a miss in the routed
partition is final.
"""

from __future__ import annotations

import zlib

from ..core.types import HashFunction, Key

INT32_MAX = 0x7FFFFFFF


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def hadoop_text_hash(key: Key) -> int:
    """Hash of a Hadoop ``Text`` key (``WritableComparator.hashBytes``).

    Starts at 1 and folds each byte as a signed Java byte with 32-bit
    wraparound: ``h = 31 * h + b``.
    """
    h = 1
    for b in key:
        if b > 127:
            b -= 256
        h = _to_int32(31 * h + b)
    return h


def crc32_hash(key: Key) -> int:
    """CRC32 of the key bytes."""
    return zlib.crc32(key)


HASH_FUNCTIONS: dict[str, HashFunction] = {
    "hadoop-text": hadoop_text_hash,
    "crc32": crc32_hash,
}


def get_hash_function(name: str) -> HashFunction:
    try:
        return HASH_FUNCTIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown partitioner: {name!r} (expected one of {sorted(HASH_FUNCTIONS)})"
        ) from None


class PartitionRouter:
    """Deterministic key -> partition index mapping.

    Args:
        hash_function: Callable producing an int from the key bytes

    Invariants:
        - Same key always maps to the same index for a given partition count
        - Index is always in ``range(partition_count)``
    """

    def __init__(self, hash_function: HashFunction = hadoop_text_hash):
        self.hash_function = hash_function

    def route(self, key: Key, partition_count: int) -> int:
        """Return the partition index for ``key``."""
        if partition_count <= 0:
            raise ValueError(f"partition_count must be positive, got {partition_count}")  # noqa: TRY003
        return (self.hash_function(key) & INT32_MAX) % partition_count
