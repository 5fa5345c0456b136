"""Unit tests for partition routing."""

import pytest

from segment_store.components.router import (
    PartitionRouter,
    crc32_hash,
    get_hash_function,
    hadoop_text_hash,
)


def test_hadoop_text_hash_known_values():
    """Hash matches Hadoop's WritableComparator.hashBytes."""
    assert hadoop_text_hash(b"") == 1
    assert hadoop_text_hash(b"a") == 128
    # 31^5 + "hello".hashCode()
    assert hadoop_text_hash(b"hello") == 127791473


def test_hadoop_text_hash_signed_bytes():
    """Bytes >= 0x80 are folded as negative Java bytes."""
    assert hadoop_text_hash(b"\xff") == 30
    assert hadoop_text_hash("é".encode("utf-8")) == (31 * (31 - 61)) + (-87)


def test_hadoop_text_hash_wraps_to_int32():
    """Long keys overflow into negative 32-bit values like Java ints."""
    assert hadoop_text_hash(b"doc-42") == -439043468
    for key in [b"x" * 100, "日本語のテキスト".encode("utf-8")]:
        h = hadoop_text_hash(key)
        assert -(2**31) <= h < 2**31


def test_route_masks_sign_bit():
    """Negative hashes are masked, not negated."""
    router = PartitionRouter()
    assert router.route(b"doc-42", 4) == ((-439043468) & 0x7FFFFFFF) % 4
    assert router.route(b"doc-42", 4) == 0
    assert router.route(b"hello", 4) == 1


def test_route_is_deterministic():
    """Same key always lands in the same partition."""
    router = PartitionRouter()
    keys = [f"doc-{i}".encode() for i in range(200)]
    first = [router.route(k, 7) for k in keys]
    second = [PartitionRouter().route(k, 7) for k in keys]
    assert first == second
    assert all(0 <= p < 7 for p in first)


def test_route_spreads_keys():
    """Routing uses every partition for a reasonable key set."""
    router = PartitionRouter()
    used = {router.route(f"doc-{i}".encode(), 4) for i in range(100)}
    assert used == {0, 1, 2, 3}


def test_route_single_partition():
    router = PartitionRouter()
    assert router.route(b"anything", 1) == 0


def test_route_invalid_partition_count():
    router = PartitionRouter()
    with pytest.raises(ValueError):
        router.route(b"key", 0)


def test_custom_hash_function():
    """Injected hash functions are honored."""
    router = PartitionRouter(lambda key: 2)
    assert router.route(b"doc-42", 4) == 2


def test_get_hash_function():
    assert get_hash_function("hadoop-text") is hadoop_text_hash
    assert get_hash_function("crc32") is crc32_hash
    assert crc32_hash(b"hello") == 0x3610A686
    with pytest.raises(ValueError, match="Unknown partitioner"):
        get_hash_function("md5")
