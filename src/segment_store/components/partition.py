"""Partition reader: sparse-index-assisted search over a sorted data file.

Provides read-only lookups against one immutable partition.
"""

from __future__ import annotations

import logging
import os
import struct
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from ..core.errors import CorruptPartitionError, PartitionReadError
from ..core.types import Failure, Found, Key, LookupResult, NotFound
from ..interfaces.codec import ValueCodec
from .codec import Utf8ValueCodec
from .index import SparseIndex

logger = logging.getLogger(__name__)

# Data file format: [magic (4B)] then records of [key_len (8B)][key][value_len (8B)][value]
DATA_MAGIC = b"SGD1"
HEADER_SIZE = len(DATA_MAGIC)
_U64 = struct.Struct("<Q")


class PartitionReader:
    """Read from one immutable, key-sorted partition file.

    Args:
        data_path: Path to the ``part-NNNNN`` data file
        index_path: Path to the ``part-NNNNN.index`` sparse index
        codec: Codec used to decode stored values

    Invariants:
        - Files are immutable after creation
        - The data file handle is opened once and held until close()
        - Each lookup holds the reader lock for its whole seek-then-scan
    """

    def __init__(
        self,
        data_path: str | Path,
        index_path: str | Path,
        codec: ValueCodec | None = None,
    ):
        self.data_path = Path(data_path)
        self.index_path = Path(index_path)
        self.codec = codec if codec is not None else Utf8ValueCodec()
        self._lock = threading.Lock()

        self._index = SparseIndex.load(self.index_path)

        self._fd: BinaryIO | None = open(self.data_path, "rb")
        try:
            magic = self._fd.read(HEADER_SIZE)
            if magic != DATA_MAGIC:
                raise CorruptPartitionError(f"Bad data magic in {self.data_path}")
            self._size = os.fstat(self._fd.fileno()).st_size
            self._index.check_offsets(HEADER_SIZE, self._size)
        except BaseException:
            self._fd.close()
            raise

        logger.debug(f"Opened partition {self.data_path} ({len(self._index)} index entries)")

    @property
    def closed(self) -> bool:
        return self._fd is None

    def lookup(self, key: Key) -> LookupResult:
        """Return Found(value), NotFound() or Failure(reason) for ``key``."""
        try:
            raw = self.get_raw(key)
            if raw is None:
                return NotFound()
            return Found(self.codec.decode(raw))
        except (OSError, ValueError, PartitionReadError) as e:
            return Failure(f"{self.data_path}: {e}", e)

    def get_raw(self, key: Key) -> bytes | None:
        """Return the raw value bytes for ``key`` or None if absent.

        Raises:
            PartitionReadError: On closed reader or malformed records
            OSError: On I/O failure
        """
        offset = self._index.find_block_offset(key, default=HEADER_SIZE)

        with self._lock:
            fd = self._require_open()
            fd.seek(offset)

            while True:
                record_key = self._read_key(fd)
                if record_key is None:
                    return None  # EOF

                # Keys are sorted, so we have passed the key
                if record_key > key:
                    return None

                value_len = self._read_length(fd, "value")
                if record_key == key:
                    value = fd.read(value_len)
                    if len(value) < value_len:
                        raise CorruptPartitionError(f"Truncated value in {self.data_path}")
                    return value

                fd.seek(value_len, 1)

    def iter_records(self) -> Iterator[tuple[Key, bytes]]:
        """Linear scan over every (key, raw value) in file order."""
        pos = HEADER_SIZE
        while True:
            with self._lock:
                fd = self._require_open()
                fd.seek(pos)
                key = self._read_key(fd)
                if key is None:
                    return
                value_len = self._read_length(fd, "value")
                value = fd.read(value_len)
                if len(value) < value_len:
                    raise CorruptPartitionError(f"Truncated value in {self.data_path}")
                pos = fd.tell()
            yield key, value

    def _require_open(self) -> BinaryIO:
        if self._fd is None:
            raise PartitionReadError(f"Partition reader is closed: {self.data_path}")
        return self._fd

    def _read_key(self, fd: BinaryIO) -> Key | None:
        """Read the next record key, or None at a clean end of file."""
        key_len_bytes = fd.read(8)
        if not key_len_bytes:
            return None
        if len(key_len_bytes) < 8:
            raise CorruptPartitionError(f"Truncated record header in {self.data_path}")

        key_len = _U64.unpack(key_len_bytes)[0]
        self._check_span(fd, key_len, "key")
        key = fd.read(key_len)
        if len(key) < key_len:
            raise CorruptPartitionError(f"Truncated key in {self.data_path}")
        return key

    def _read_u64(self, fd: BinaryIO) -> int:
        raw = fd.read(8)
        if len(raw) < 8:
            raise CorruptPartitionError(f"Truncated record header in {self.data_path}")
        return _U64.unpack(raw)[0]

    def _read_length(self, fd: BinaryIO, what: str) -> int:
        length = self._read_u64(fd)
        self._check_span(fd, length, what)
        return length

    def _check_span(self, fd: BinaryIO, length: int, what: str) -> None:
        """Reject lengths running past the end of the data file."""
        remaining = self._size - fd.tell()
        if length > remaining:
            raise CorruptPartitionError(
                f"Bad {what} length {length} at offset {fd.tell()} in {self.data_path} "
                f"({remaining} bytes left)"
            )

    def close(self) -> None:
        """Release the data file handle."""
        with self._lock:
            if self._fd:
                self._fd.close()
                self._fd = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
