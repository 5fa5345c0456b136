"""Configuration for the segment store.

Defines all tunable parameters for opening and reading a segment root.
"""

from __future__ import annotations

import tomllib  # Python 3.11+
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any


@dataclass
class SegmentStoreConfig:
    """Configuration parameters for the segment catalog.

    Attributes:
        root_path: Root directory holding ``<collection>/<segment>`` trees
        values_dir: Name of the per-segment directory holding partition files
        value_codec: Codec name used to decode stored values to text
        partitioner: Hash scheme the data was partitioned with at write time
        open_workers: Number of threads used to open segments (1 = sequential)
    """

    root_path: str
    values_dir: str = "parse_text"
    value_codec: str = "utf-8"
    partitioner: str = "hadoop-text"
    open_workers: int = 1

    def __post_init__(self) -> None:
        if self.open_workers < 1:
            raise ValueError(f"open_workers must be >= 1, got {self.open_workers}")  # noqa: TRY003

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SegmentStoreConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")  # noqa: TRY003
        return cls(**data)

    @classmethod
    def from_toml(cls, path: str | Path) -> SegmentStoreConfig:
        """Load the ``[segment_store]`` table from a TOML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        if "segment_store" not in data:
            raise ValueError(f"Missing [segment_store] table in {path}")  # noqa: TRY003
        return cls.from_dict(data["segment_store"])
