"""Segment store core."""

from .catalog import SegmentCatalog, build_catalog

__all__ = ["SegmentCatalog", "build_catalog"]
