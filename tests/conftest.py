"""Shared fixtures: a test-only writer for segment partition files."""

from __future__ import annotations

import struct
import tempfile
from pathlib import Path

import pytest

from segment_store.components.index import INDEX_MAGIC
from segment_store.components.partition import DATA_MAGIC
from segment_store.components.router import PartitionRouter

U64 = struct.Struct("<Q")


def write_partition(
    values_dir: Path,
    number: int,
    records: dict[bytes, bytes],
    index_interval: int = 2,
    with_index: bool = True,
) -> Path:
    """Write ``part-NNNNN`` (+ ``.index``) holding ``records`` in key order."""
    values_dir.mkdir(parents=True, exist_ok=True)
    data_path = values_dir / f"part-{number:05d}"
    index_entries = []

    with open(data_path, "wb") as f:
        f.write(DATA_MAGIC)
        for i, key in enumerate(sorted(records)):
            if i % index_interval == 0:
                index_entries.append((key, f.tell()))
            value = records[key]
            f.write(U64.pack(len(key)))
            f.write(key)
            f.write(U64.pack(len(value)))
            f.write(value)

    if with_index:
        with open(data_path.with_name(data_path.name + ".index"), "wb") as f:
            f.write(INDEX_MAGIC)
            for key, offset in index_entries:
                f.write(U64.pack(len(key)))
                f.write(key)
                f.write(U64.pack(offset))

    return data_path


def write_segment(
    root: Path,
    collection: str,
    segment: str,
    records: dict[str, str],
    partitions: int = 4,
    router: PartitionRouter | None = None,
    index_interval: int = 2,
    values_dir: str = "parse_text",
) -> Path:
    """Partition ``records`` with ``router`` and write them as one segment."""
    router = router or PartitionRouter()
    buckets: list[dict[bytes, bytes]] = [{} for _ in range(partitions)]
    for key, value in records.items():
        kb = key.encode("utf-8")
        buckets[router.route(kb, partitions)][kb] = value.encode("utf-8")

    segment_dir = root / collection / segment
    for number, bucket in enumerate(buckets):
        write_partition(segment_dir / values_dir, number, bucket, index_interval)
    return segment_dir


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_partition():
    """Factory fixture for :func:`write_partition`."""
    return write_partition


@pytest.fixture
def make_segment():
    """Factory fixture for :func:`write_segment`."""
    return write_segment
