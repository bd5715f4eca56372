"""Filesystem capability used by the split engine.

Every disk access the engine makes goes through a :class:`FileSystem`
so the core logic can run against a fake (pyfakefs, or a recording
wrapper in tests) without touching real disk state.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO, Protocol

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    """Operations the engine needs. Mutating methods are marked below."""

    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def is_regular_file(self, path: Path) -> bool: ...

    def size(self, path: Path) -> int: ...

    def listdir(self, path: Path) -> list[str]: ...

    def walk(self, root: Path) -> Iterator[tuple[Path, list[str], list[str]]]: ...

    def open_read(self, path: Path) -> BinaryIO: ...

    # -- mutating --

    def open_write(self, path: Path) -> BinaryIO: ...

    def makedirs(self, path: Path) -> None: ...

    def remove(self, path: Path) -> bool: ...

    def replace(self, src: Path, dst: Path) -> None: ...


class LocalFileSystem:
    """:class:`FileSystem` backed by the ``os`` module."""

    def exists(self, path: Path) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: Path) -> bool:
        return os.path.isdir(path)

    def is_regular_file(self, path: Path) -> bool:
        """True for regular files only; symlinks and special files are not."""
        try:
            mode = os.lstat(path).st_mode
        except FileNotFoundError:
            return False
        return stat.S_ISREG(mode)

    def size(self, path: Path) -> int:
        return os.stat(path).st_size

    def listdir(self, path: Path) -> list[str]:
        return os.listdir(path)

    def walk(self, root: Path) -> Iterator[tuple[Path, list[str], list[str]]]:
        """Top-down walk that never follows symlinked directories.

        Errors listing a directory propagate instead of being skipped
        silently, so a partial tree is never mistaken for a full one.
        """

        def _raise(err: OSError) -> None:
            raise err

        for dirpath, dirnames, filenames in os.walk(
            str(root), followlinks=False, onerror=_raise
        ):
            yield Path(dirpath), dirnames, filenames

    def open_read(self, path: Path) -> BinaryIO:
        return open(path, "rb")

    def open_write(self, path: Path) -> BinaryIO:
        return open(path, "wb")

    def makedirs(self, path: Path) -> None:
        os.makedirs(path, exist_ok=True)

    def remove(self, path: Path) -> bool:
        """Delete *path*. Returns False if it was already absent."""
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.debug("Already absent: %s", path)
            return False
        return True

    def replace(self, src: Path, dst: Path) -> None:
        """Atomically rename *src* to *dst*, replacing *dst* if present."""
        os.replace(src, dst)
