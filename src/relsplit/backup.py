"""Move an oversized file to its backup location before it is split.

Once :meth:`BackupRelocator.relocate` returns, the original bytes are
safe at the backup path whatever happens to the split afterwards, so a
failed run can simply be repeated.
"""

from __future__ import annotations

import logging
from pathlib import Path

from relsplit.fs import FileSystem, LocalFileSystem
from relsplit.paths import BackupLayout

logger = logging.getLogger(__name__)


class BackupRelocator:
    """Parks originals under the backup root.

    Usage::

        relocator = BackupRelocator(layout)
        backup_path = relocator.relocate(Path("/repo/release/app.bin"))
    """

    def __init__(self, layout: BackupLayout, fs: FileSystem | None = None) -> None:
        self.layout = layout
        self.fs = fs or LocalFileSystem()

    def backup_path_for(self, source: Path) -> Path:
        return Path(self.layout.location_for(Path(source).absolute()))

    def relocate(self, source: Path, dry_run: bool = False) -> Path:
        """Move *source* to its backup path and return that path.

        Intermediate directories are created as needed and any stale
        backup at the destination is replaced. The rename is the last
        step: if anything before it fails, *source* is left untouched.

        Args:
            source: File to move.
            dry_run: Compute and return the destination without moving.
        """
        backup_path = self.backup_path_for(source)
        if dry_run:
            return backup_path

        self.fs.makedirs(backup_path.parent)
        if self.fs.remove(backup_path):
            logger.info("Replaced stale backup %s", backup_path)
        self.fs.replace(source, backup_path)
        logger.info("Moved %s -> %s", source, backup_path)
        return backup_path
