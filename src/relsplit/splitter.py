"""Chunked streaming split of one file into numbered parts."""

from __future__ import annotations

import logging
from pathlib import Path

from relsplit.constants import DEFAULT_BUFFER_BYTES, DEFAULT_PART_WIDTH
from relsplit.fs import FileSystem, LocalFileSystem
from relsplit.models import PartFile
from relsplit.parts import check_part_limit, part_name

logger = logging.getLogger(__name__)


def split_file(
    source: Path,
    target_dir: Path,
    base_name: str,
    chunk_bytes: int,
    buffer_bytes: int = DEFAULT_BUFFER_BYTES,
    part_width: int = DEFAULT_PART_WIDTH,
    fs: FileSystem | None = None,
) -> list[PartFile]:
    """Write *source* out as ``<base_name>.partNN`` files in *target_dir*.

    Reads at most *buffer_bytes* at a time, so memory stays flat
    regardless of file or chunk size. Each part is closed before the
    next is opened. The parts concatenate, in numeric order,
    to the exact bytes of *source*; a zero-byte source yields no parts.

    Args:
        source: File to read. Left in place.
        target_dir: Directory the parts are written to.
        base_name: Name the parts are derived from.
        chunk_bytes: Maximum size of each part.
        buffer_bytes: Maximum size of each read.
        part_width: Digits in the part number.
        fs: Filesystem capability; the local disk by default.

    Returns:
        The parts written, in order.

    Raises:
        PartLimitExceededError: If the split needs more parts than
            *part_width* digits can number. Raised before any part is
            written.
        OSError: If *source* ends before its reported size.
    """
    fs = fs or LocalFileSystem()
    target_dir = Path(target_dir)
    parts: list[PartFile] = []

    with fs.open_read(source) as src:
        total_bytes = fs.size(source)
        check_part_limit(source, total_bytes, chunk_bytes, part_width)

        offset = 0
        index = 1

        while offset < total_bytes:
            part_path = target_dir / part_name(base_name, index, part_width)
            remaining = min(chunk_bytes, total_bytes - offset)
            written = 0

            with fs.open_write(part_path) as out:
                while remaining > 0:
                    block = src.read(min(buffer_bytes, remaining))
                    if not block:
                        raise OSError(
                            f"{source} ended at byte {offset}, "
                            f"expected {total_bytes}"
                        )
                    out.write(block)
                    offset += len(block)
                    written += len(block)
                    remaining -= len(block)

            parts.append(PartFile(path=part_path, index=index, size=written))
            logger.debug("Wrote %s (%d bytes)", part_path, written)
            index += 1

    logger.info("Split %s into %d part(s)", source, len(parts))
    return parts
