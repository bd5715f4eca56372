"""Release tree discovery and candidate selection.

Walks the release directory, then picks out the files that are too big
for the host and are not themselves part files from an earlier split.
"""

from __future__ import annotations

import logging
from pathlib import Path

from relsplit.config import RunConfiguration
from relsplit.fs import FileSystem, LocalFileSystem
from relsplit.models import Candidate
from relsplit.parts import is_part_file

logger = logging.getLogger(__name__)


class FileScanner:
    """Finds split candidates under ``config.root_dir``.

    Usage:
        scanner = FileScanner(config)
        candidates = scanner.select_candidates(scanner.discover_files())
    """

    def __init__(
        self, config: RunConfiguration, fs: FileSystem | None = None
    ) -> None:
        self.config = config
        self.fs = fs or LocalFileSystem()

    def discover_files(self) -> list[Path]:
        """Return every regular file under the root, recursively.

        Symlinks are not followed and special files are skipped. The backup
        root is pruned when it lies inside the scanned tree so parked
        originals are never picked up again.
        """
        root = Path(self.config.root_dir).absolute()
        backup_root = Path(self.config.backup_root).absolute()
        matched: list[Path] = []

        for current, dirnames, filenames in self.fs.walk(root):
            # Prune IN-PLACE so the walk skips them
            dirnames[:] = [d for d in dirnames if current / d != backup_root]

            for filename in filenames:
                full_path = current / filename
                if not self.fs.is_regular_file(full_path):
                    logger.debug("Skipping non-regular file %s", full_path)
                    continue
                matched.append(full_path)

        logger.info("Discovered %d files under %s", len(matched), root)
        return matched

    def select_candidates(self, files: list[Path]) -> list[Candidate]:
        """Keep oversized non-part files, largest first.

        Equal sizes keep discovery order.
        """
        candidates: list[Candidate] = []
        for file_path in files:
            if is_part_file(file_path.name, self.config.part_width):
                continue
            size = self.fs.size(file_path)
            if size <= self.config.max_bytes:
                continue
            candidates.append(Candidate(path=file_path, size=size))

        candidates.sort(key=lambda c: c.size, reverse=True)
        logger.info(
            "Selected %d candidate(s) above %d bytes",
            len(candidates),
            self.config.max_bytes,
        )
        return candidates

    def scan(self) -> list[Candidate]:
        """Discover and select in one step."""
        return self.select_candidates(self.discover_files())
