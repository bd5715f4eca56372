"""Part-file naming and the part set that belongs to one base name.

A file ``app.bin`` split into three chunks becomes ``app.bin.part01``,
``app.bin.part02`` and ``app.bin.part03`` in the same directory.
"""

from __future__ import annotations

import functools
import logging
import re
from pathlib import Path

from relsplit.constants import DEFAULT_PART_WIDTH
from relsplit.exceptions import PartLimitExceededError
from relsplit.fs import FileSystem

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def _suffix_re(width: int) -> re.Pattern[str]:
    return re.compile(rf"\.part\d{{{width}}}$", re.IGNORECASE)


def part_name(base_name: str, index: int, width: int = DEFAULT_PART_WIDTH) -> str:
    """``part_name("app.bin", 3)`` -> ``"app.bin.part03"``."""
    return f"{base_name}.part{index:0{width}d}"


def is_part_file(name: str, width: int = DEFAULT_PART_WIDTH) -> bool:
    """True if *name* ends in a part suffix such as ``.part07``."""
    return _suffix_re(width).search(name) is not None


def is_part_of(name: str, base_name: str, width: int = DEFAULT_PART_WIDTH) -> bool:
    """True if *name* is exactly ``<base_name>.partNN``."""
    if not name.startswith(base_name):
        return False
    return _suffix_re(width).fullmatch(name[len(base_name):]) is not None


def list_existing_parts(
    fs: FileSystem,
    directory: Path,
    base_name: str,
    width: int = DEFAULT_PART_WIDTH,
) -> list[Path]:
    """Return the part files for *base_name* in *directory*, sorted by name.

    A missing directory has no parts.
    """
    if not fs.is_dir(directory):
        return []
    parts = [
        directory / name
        for name in fs.listdir(directory)
        if is_part_of(name, base_name, width)
        and fs.is_regular_file(directory / name)
    ]
    parts.sort(key=lambda p: p.name)
    return parts


def reset_parts(
    fs: FileSystem,
    directory: Path,
    base_name: str,
    width: int = DEFAULT_PART_WIDTH,
    dry_run: bool = False,
) -> list[Path]:
    """Delete every existing part of *base_name* before a fresh split.

    Parts that vanish between listing and deletion count as removed.
    In dry-run mode nothing is deleted.

    Returns:
        The part paths that were (or in dry-run, would be) removed.
    """
    parts = list_existing_parts(fs, directory, base_name, width)
    if dry_run:
        return parts
    for part in parts:
        fs.remove(part)
        logger.debug("Removed stale part %s", part)
    if parts:
        logger.info("Removed %d stale part(s) of %s", len(parts), base_name)
    return parts


def plan_chunks(total_bytes: int, chunk_bytes: int) -> list[int]:
    """Sizes of the parts a file of *total_bytes* splits into.

    Every part is *chunk_bytes* long except a shorter final one; an exact
    multiple has no short part and a zero-byte file has no parts at all.
    """
    full, rest = divmod(total_bytes, chunk_bytes)
    return [chunk_bytes] * full + ([rest] if rest else [])


def check_part_limit(
    path: Path | str,
    total_bytes: int,
    chunk_bytes: int,
    width: int = DEFAULT_PART_WIDTH,
) -> int:
    """Return the part count for a split, or raise if it needs too many.

    Raises:
        PartLimitExceededError: If the count exceeds ``10**width - 1``.
    """
    needed = -(-total_bytes // chunk_bytes)
    limit = 10**width - 1
    if needed > limit:
        raise PartLimitExceededError(str(path), needed, limit)
    return needed
