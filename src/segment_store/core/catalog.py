"""Segment catalog - main public API.

Discovers ``<collection>/<segment>`` directories under a root once, opens
every segment, and serves lookups by (collection, segment, key).
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from sortedcontainers import SortedDict

from ..components.codec import get_codec
from ..components.discovery import list_directories
from ..components.router import PartitionRouter, get_hash_function
from ..components.segment import SegmentStore
from .config import SegmentStoreConfig
from .errors import CatalogBuildError, SegmentStoreError
from .types import Failure, Found, HashFunction, LookupResult, MissReason, NotFound

logger = logging.getLogger(__name__)

# collection -> segment -> store
Catalog = SortedDict
SegmentOpener = Callable[[Path], SegmentStore]


def build_catalog(root: str | Path, open_segment: SegmentOpener, workers: int = 1) -> Catalog:
    """Discover and open every segment under ``root``.

    All-or-nothing: on any failure every segment opened so far is closed and
    ``CatalogBuildError`` is raised.
    """
    root = Path(root)
    catalog: Catalog = SortedDict()

    if not root.exists():
        logger.warning(f"No per-collection segment directories under: {root}")
        return catalog

    try:
        layout: list[tuple[str, list[Path]]] = []
        for collection_dir in list_directories(root):
            segment_dirs = list_directories(collection_dir)
            if not segment_dirs:
                logger.debug(f"Skipping collection without segments: {collection_dir}")
                continue
            layout.append((collection_dir.name, segment_dirs))
    except OSError as e:
        raise CatalogBuildError(f"Failed to list segment directories under {root}: {e}") from e

    if not layout:
        logger.warning(f"No per-collection segment directories under: {root}")
        return catalog

    jobs = [(collection, seg_dir) for collection, seg_dirs in layout for seg_dir in seg_dirs]
    opened: list[tuple[str, str, SegmentStore]] = []

    try:
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="SegmentOpen") as pool:
                futures = [(collection, seg_dir, pool.submit(open_segment, seg_dir)) for collection, seg_dir in jobs]
                error: BaseException | None = None
                # Drain every future so no opened store is leaked
                for collection, seg_dir, future in futures:
                    try:
                        opened.append((collection, seg_dir.name, future.result()))
                    except BaseException as e:  # noqa: PERF203
                        error = error or e
                if error is not None:
                    raise error
        else:
            for collection, seg_dir in jobs:
                opened.append((collection, seg_dir.name, open_segment(seg_dir)))
    except BaseException as e:
        for _, _, store in opened:
            store.close()
        if isinstance(e, CatalogBuildError):
            raise
        if isinstance(e, (OSError, SegmentStoreError)):
            raise CatalogBuildError(f"Failed to open segments under {root}: {e}") from e
        raise

    for collection, segment, store in opened:
        catalog.setdefault(collection, SortedDict())[segment] = store

    logger.info(
        f"Built catalog under {root}: {len(catalog)} collections, {len(opened)} segments"
    )
    return catalog


class SegmentCatalog:
    """Read-only lookup service over a segment root.

    Args:
        config: Segment store configuration
        hash_function: Overrides the configured partitioner hash

    Public API:
        - lookup(collection, segment, key): Found / NotFound / Failure
        - get_text(collection, segment, key): Plain string, ``default`` on any miss
        - collections(), segments(collection): Catalog introspection
        - close(): Release every partition file handle

    Invariants:
        - Catalog is built once in the constructor and never mutated
        - Lookups never raise for unknown names, missing keys or read errors
    """

    def __init__(self, config: SegmentStoreConfig, hash_function: HashFunction | None = None):
        self.config = config
        self.root = Path(config.root_path)
        self._codec = get_codec(config.value_codec)
        self._router = PartitionRouter(hash_function or get_hash_function(config.partitioner))
        self._closed = False

        self._catalog = build_catalog(self.root, self._open_segment, config.open_workers)

        logger.info(f"Initialized segment catalog at {self.root}")

    def _open_segment(self, segment_dir: Path) -> SegmentStore:
        return SegmentStore.open(segment_dir, self.config.values_dir, self._codec, self._router)

    def collections(self) -> list[str]:
        return list(self._catalog.keys())

    def segments(self, collection: str) -> list[str]:
        return list(self._catalog.get(collection, ()))

    def get_segment(self, collection: str, segment: str) -> SegmentStore | None:
        segments = self._catalog.get(collection)
        if segments is None:
            return None
        return segments.get(segment)

    def lookup(self, collection: str, segment: str, key: str) -> LookupResult:
        """Retrieve the payload text stored for ``key``."""
        segments = self._catalog.get(collection)
        if segments is None:
            logger.warning(f"Collection not found: {collection}")
            return NotFound(MissReason.UNKNOWN_COLLECTION)

        store = segments.get(segment)
        if store is None:
            logger.warning(f"Segment not found: {collection}/{segment}")
            return NotFound(MissReason.UNKNOWN_SEGMENT)

        if self._closed:
            return Failure("Catalog is closed")

        try:
            key_bytes = key.encode("utf-8")
        except UnicodeEncodeError as e:
            logger.warning(f"Key is not encodable as UTF-8: {collection}/{segment}: {key!r}: {e}")
            return NotFound()

        result = store.lookup(key_bytes)

        if isinstance(result, NotFound):
            logger.warning(f"No value found for key: {collection}/{segment}: {key}")
        elif isinstance(result, Failure):
            logger.warning(f"Error retrieving key: {collection}/{segment}: {key}: {result.reason}")
        return result

    def get_text(self, collection: str, segment: str, key: str, default: str = "") -> str:
        """String-only view of lookup(); ``default`` on any non-Found result."""
        result = self.lookup(collection, segment, key)
        if isinstance(result, Found):
            return result.value
        return default

    def close(self) -> None:
        """Close every partition reader."""
        if self._closed:
            return
        logger.info(f"Closing segment catalog at {self.root}")
        self._closed = True
        for segments in self._catalog.values():
            for store in segments.values():
                store.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
