"""Directory discovery helpers for the catalog build."""

from __future__ import annotations

import re
from pathlib import Path

PARTITION_RE = re.compile(r"^part-(\d+)$")
INDEX_SUFFIX = ".index"


def is_directory(path: Path) -> bool:
    """True if ``path`` is a directory; unreadable entries count as not."""
    try:
        return path.is_dir()
    except OSError:
        return False


def list_directories(path: Path) -> list[Path]:
    """Subdirectories of ``path`` sorted by name.

    Raises:
        OSError: If ``path`` cannot be listed
    """
    return sorted((p for p in path.iterdir() if is_directory(p)), key=lambda p: p.name)


def list_partitions(values_dir: Path) -> list[tuple[int, Path, Path]]:
    """Return ``(number, data_path, index_path)`` per partition, ordered by number.

    Files that are not ``part-NNNNN`` data files are ignored.

    Raises:
        OSError: If ``values_dir`` cannot be listed
    """
    parts = []
    for entry in values_dir.iterdir():
        match = PARTITION_RE.match(entry.name)
        if match and entry.is_file():
            parts.append((int(match.group(1)), entry, entry.with_name(entry.name + INDEX_SUFFIX)))
    parts.sort(key=lambda p: p[0])
    return parts
