"""Segment store: the fixed set of partition readers for one segment."""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.errors import CatalogBuildError, SegmentStoreError
from ..core.types import Key, LookupResult
from ..interfaces.codec import ValueCodec
from ..interfaces.partition import PartitionLookup
from .discovery import list_partitions
from .partition import PartitionReader
from .router import PartitionRouter

logger = logging.getLogger(__name__)


class SegmentStore:
    """Owns the partition readers of one segment, indexed 0..N-1.

    Args:
        path: Segment directory
        readers: Partition readers ordered by partition number
        router: Router reproducing the write-time partitioner

    Invariants:
        - Partition count is fixed at open time
        - A key is only ever looked up in its routed partition
    """

    def __init__(self, path: Path, readers: tuple[PartitionLookup, ...], router: PartitionRouter):
        if not readers:
            raise ValueError("A segment needs at least one partition")  # noqa: TRY003
        self.path = path
        self.readers = readers
        self.router = router

    @classmethod
    def open(
        cls,
        segment_dir: str | Path,
        values_dir: str,
        codec: ValueCodec,
        router: PartitionRouter,
    ) -> SegmentStore:
        """Open every partition under ``segment_dir/values_dir``.

        Raises:
            CatalogBuildError: If the partition set is missing, incomplete or unreadable
        """
        segment_dir = Path(segment_dir)
        parts_dir = segment_dir / values_dir

        try:
            parts = list_partitions(parts_dir)
        except OSError as e:
            raise CatalogBuildError(f"Cannot list partitions in {parts_dir}: {e}") from e

        if not parts:
            raise CatalogBuildError(f"No partition files in {parts_dir}")

        numbers = [number for number, _, _ in parts]
        if numbers != list(range(len(parts))):
            raise CatalogBuildError(f"Partition numbers in {parts_dir} are not contiguous from 0: {numbers}")

        readers: list[PartitionReader] = []
        try:
            for _, data_path, index_path in parts:
                readers.append(PartitionReader(data_path, index_path, codec))
        except (OSError, SegmentStoreError) as e:
            for reader in readers:
                reader.close()
            raise CatalogBuildError(f"Failed to open partition in {parts_dir}: {e}") from e

        logger.info(f"Opened segment {segment_dir} with {len(readers)} partitions")
        return cls(segment_dir, tuple(readers), router)

    @property
    def partition_count(self) -> int:
        return len(self.readers)

    def partition_for(self, key: Key) -> int:
        return self.router.route(key, self.partition_count)

    def lookup(self, key: Key) -> LookupResult:
        """Look ``key`` up in its routed partition only."""
        return self.readers[self.partition_for(key)].lookup(key)

    def close(self) -> None:
        for reader in self.readers:
            reader.close()
