"""Backup location rules.

Maps the absolute path of a file about to be split to the place its
original bytes are parked while the split runs:

* inside the repository: ``<backup_root>/<path relative to repo_root>``
* anywhere else: ``<backup_root>/_external/<TOKEN>/<path without anchor>``
  where TOKEN is the upper-cased drive letter (``C`` for ``C:\\...``) or
  ``ROOT`` for POSIX ``/`` and any other anchor (UNC shares included).

Both POSIX and Windows paths are handled lexically through the pure path
flavours, so the rules can be exercised for either platform on any host.
Nothing here touches the filesystem.
"""

from __future__ import annotations

import ntpath
import posixpath
from pathlib import Path, PurePath, PureWindowsPath
from typing import TYPE_CHECKING

from relsplit.constants import EXTERNAL_DIRNAME, ROOT_TOKEN

if TYPE_CHECKING:
    from relsplit.config import RunConfiguration


def _normalize(path: PurePath) -> PurePath:
    """Collapse ``.`` and ``..`` segments without consulting the disk."""
    module = ntpath if isinstance(path, PureWindowsPath) else posixpath
    return type(path)(module.normpath(str(path)))


def root_token(path: PurePath) -> str:
    """Identifier for the filesystem root *path* hangs off."""
    drive = path.drive
    if len(drive) == 2 and drive[1] == ":" and drive[0].isalpha():
        return drive[0].upper()
    return ROOT_TOKEN


class BackupLayout:
    """Computes where the backup copy of a file lives.

    Usage::

        layout = BackupLayout(repo_root=Path("/work/app"),
                              backup_root=Path("/work/app/backup"))
        layout.location_for(Path("/work/app/release/app.bin"))
        # -> /work/app/backup/release/app.bin
    """

    def __init__(self, repo_root: PurePath, backup_root: PurePath) -> None:
        self.repo_root = _normalize(repo_root)
        self.backup_root = _normalize(backup_root)

    def is_inside_repo(self, path: PurePath) -> bool:
        return _normalize(path).is_relative_to(self.repo_root)

    def location_for(self, path: PurePath) -> PurePath:
        """Return the backup path for absolute *path*.

        Deterministic for a given path and layout; paths inside the repo
        root never produce an ``_external`` segment and paths outside
        always do.

        Raises:
            ValueError: If *path* is not absolute.
        """
        if not path.is_absolute():
            raise ValueError(f"Backup location needs an absolute path: {path}")

        normalized = _normalize(path)
        if normalized.is_relative_to(self.repo_root):
            return self.backup_root / normalized.relative_to(self.repo_root)

        rest = normalized.parts[1:]  # parts[0] is the anchor
        return self.backup_root.joinpath(
            EXTERNAL_DIRNAME, root_token(normalized), *rest
        )

    def original_for(self, backup_path: PurePath) -> PurePath | None:
        """Inverse of :meth:`location_for`.

        Returns None for paths outside the backup root and for external
        entries whose root token cannot be rebuilt on this path flavour.
        """
        normalized = _normalize(backup_path)
        if not normalized.is_relative_to(self.backup_root):
            return None
        rel = normalized.relative_to(self.backup_root).parts
        if not rel:
            return None
        if rel[0] != EXTERNAL_DIRNAME:
            return self.repo_root.joinpath(*rel)
        if len(rel) < 3:
            return None

        token, rest = rel[1], rel[2:]
        flavour = type(self.repo_root)
        if token == ROOT_TOKEN and not isinstance(self.repo_root, PureWindowsPath):
            return flavour("/").joinpath(*rest)
        if len(token) == 1 and token.isalpha() and isinstance(
            self.repo_root, PureWindowsPath
        ):
            return flavour(f"{token}:\\").joinpath(*rest)
        return None


def layout_from_config(config: RunConfiguration) -> BackupLayout:
    """Build the layout for a :class:`~relsplit.config.RunConfiguration`."""
    return BackupLayout(
        Path(config.repo_root).absolute(), Path(config.backup_root).absolute()
    )
