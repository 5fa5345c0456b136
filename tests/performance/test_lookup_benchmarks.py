"""Performance benchmarks for segment lookups."""

import random
import threading
import time

import pytest

from segment_store import Found, SegmentCatalog, SegmentStoreConfig

NUM_RECORDS = 5000


@pytest.fixture
def benchmark_catalog(temp_dir, make_segment):
    """Catalog over one segment with a sparse index every 32 records."""
    records = {f"doc-{i:08d}": f"value{i}" * 10 for i in range(NUM_RECORDS)}
    make_segment(temp_dir, "bench", "seg", records, partitions=8, index_interval=32)
    catalog = SegmentCatalog(SegmentStoreConfig(root_path=str(temp_dir)))
    yield catalog, records
    catalog.close()


def test_random_lookup_performance(benchmark_catalog):
    """Benchmark random point lookups."""
    catalog, records = benchmark_catalog
    keys = random.sample(list(records), 1000)

    start_time = time.time()
    for key in keys:
        assert catalog.lookup("bench", "seg", key) == Found(records[key])
    duration = time.time() - start_time

    lookups_per_second = len(keys) / duration if duration > 0 else float("inf")
    print(f"\nRandom lookups: {lookups_per_second:.0f} ops/sec")

    assert lookups_per_second > 500


def test_missing_key_lookup_performance(benchmark_catalog):
    """Misses stop at the first greater key instead of scanning to EOF."""
    catalog, _ = benchmark_catalog
    keys = [f"doc-{i:08d}-absent" for i in range(1000)]

    start_time = time.time()
    for key in keys:
        catalog.lookup("bench", "seg", key)
    duration = time.time() - start_time

    lookups_per_second = len(keys) / duration if duration > 0 else float("inf")
    print(f"\nMissing-key lookups: {lookups_per_second:.0f} ops/sec")

    assert lookups_per_second > 500


def test_concurrent_lookup_performance(benchmark_catalog):
    """Benchmark lookups from several threads sharing the readers."""
    catalog, records = benchmark_catalog
    keys = list(records)
    mismatches = []

    def worker(seed):
        rng = random.Random(seed)
        for _ in range(250):
            key = rng.choice(keys)
            if catalog.lookup("bench", "seg", key) != Found(records[key]):
                mismatches.append(key)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    start_time = time.time()
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    duration = time.time() - start_time

    total = 8 * 250
    print(f"\nConcurrent lookups: {total / duration if duration > 0 else float('inf'):.0f} ops/sec")

    assert mismatches == []
