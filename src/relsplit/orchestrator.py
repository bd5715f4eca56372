"""Split orchestrator coordinating the scan-backup-split pipeline.

For every oversized file under the release directory, one at a time and
largest first:

1. Remove stale parts left by an earlier split of the same name
2. Move the original to its backup location (the durability boundary)
3. Split the backup copy into parts beside where the original was

The original's directory entry stays empty afterwards; rebuilding it
from the parts is left to the consumer (``cat name.part?? > name``).
Any error aborts the remaining candidates. Because the original is
parked before anything is written, re-running after a failure is safe:
backups whose original is gone but whose parts are missing, incomplete or
cut at a different chunk size are split again from the backup.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from rich.console import Console

from relsplit.backup import BackupRelocator
from relsplit.config import RunConfiguration
from relsplit.fs import FileSystem, LocalFileSystem
from relsplit.models import Candidate, PartFile, RunSummary, SplitResult
from relsplit.parts import (
    check_part_limit,
    list_existing_parts,
    part_name,
    plan_chunks,
    reset_parts,
)
from relsplit.paths import layout_from_config
from relsplit.scanner import FileScanner
from relsplit.splitter import split_file

logger = logging.getLogger(__name__)


class SplitOrchestrator:
    """Runs one split pass over ``config.root_dir``.

    Usage::

        config = default_config().validate()
        summary = SplitOrchestrator(config, Console()).run()
        print(summary.summary)
    """

    def __init__(
        self,
        config: RunConfiguration,
        console: Console,
        fs: FileSystem | None = None,
    ) -> None:
        self.config = config
        self.console = console
        self.fs = fs or LocalFileSystem()
        self.layout = layout_from_config(config)
        self.scanner = FileScanner(config, self.fs)
        self.relocator = BackupRelocator(self.layout, self.fs)

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run

    def run(self) -> RunSummary:
        """Execute the pipeline.

        Returns:
            RunSummary describing what was (or in dry-run, would be) done.

        Raises:
            PartLimitExceededError: If any file would need more parts than
                the part width allows. Checked for every file before the
                first one is touched.
            OSError: On any filesystem failure; remaining candidates are
                not processed.
        """
        root = Path(self.config.root_dir).absolute()
        summary = RunSummary(root_dir=root, dry_run=self.dry_run)

        if not self.fs.is_dir(root):
            self._say(f"skip: release dir not found: {root}")
            summary.skipped_reason = "root_missing"
            return summary

        summary.candidates = self.scanner.scan()
        interrupted = self.find_interrupted()
        summary.interrupted = [candidate for candidate, _ in interrupted]

        if not summary.candidates and not interrupted:
            self._say(f"ok: no files exceed {self.config.max_bytes} bytes")
            return summary

        if summary.candidates:
            self._say(
                f"found {len(summary.candidates)} file(s) > "
                f"{self.config.max_bytes} bytes"
            )
        if interrupted:
            self._say(f"found {len(interrupted)} interrupted split(s)")

        for candidate in summary.interrupted + summary.candidates:
            check_part_limit(
                candidate.path,
                candidate.size,
                self.config.chunk_bytes,
                self.config.part_width,
            )

        for candidate, backup_path in interrupted:
            summary.results.append(
                self._guarded(candidate, self._resume, candidate, backup_path)
            )
        for candidate in summary.candidates:
            summary.results.append(
                self._guarded(candidate, self._process, candidate)
            )

        self._say("done")
        logger.info("Run complete: %s", summary.summary)
        return summary

    def find_interrupted(self) -> list[tuple[Candidate, Path]]:
        """Backups under the release dir whose split never finished.

        A backup qualifies when its original is absent, it is above the
        size ceiling, and the parts beside the original do not match what
        a split with the current chunk size would produce. A backup with
        no parts at all qualifies too: the run that parked it died before
        part01 was written.

        Returns:
            (candidate, backup path) pairs, largest first.
        """
        backup_root = Path(self.layout.backup_root)
        if not self.fs.is_dir(backup_root):
            return []

        root = Path(self.config.root_dir).absolute()
        found: list[tuple[Candidate, Path]] = []

        for current, _dirnames, filenames in self.fs.walk(backup_root):
            for filename in filenames:
                backup_path = current / filename
                original = self.layout.original_for(backup_path)
                if original is None:
                    continue
                original = Path(original)
                if not original.is_relative_to(root) or self.fs.exists(original):
                    continue
                if not self.fs.is_regular_file(backup_path):
                    continue
                size = self.fs.size(backup_path)
                if size <= self.config.max_bytes:
                    continue
                if self._parts_complete(original, size):
                    continue
                found.append((Candidate(path=original, size=size), backup_path))

        found.sort(key=lambda item: item[0].size, reverse=True)
        if found:
            logger.info("Found %d interrupted split(s)", len(found))
        return found

    def _parts_complete(self, original: Path, size: int) -> bool:
        """Whether the parts of *original* match a fresh split of *size* bytes."""
        width = self.config.part_width
        existing = list_existing_parts(self.fs, original.parent, original.name, width)
        if not existing:
            logger.warning("Backup of %s has no parts", original)
            return False
        expected = plan_chunks(size, self.config.chunk_bytes)
        expected_names = [
            part_name(original.name, i, width) for i in range(1, len(expected) + 1)
        ]
        return [p.name for p in existing] == expected_names and [
            self.fs.size(p) for p in existing
        ] == expected

    def _say(self, message: str) -> None:
        # Paths may contain square brackets; keep Rich from reading them as markup
        self.console.print(message, markup=False, highlight=False)

    def _guarded(
        self,
        candidate: Candidate,
        step: Callable[..., SplitResult],
        *args: object,
    ) -> SplitResult:
        try:
            return step(*args)
        except OSError as e:
            logger.error("Failed to split %s: %s", candidate.path, e)
            raise

    # ------------------------------------------------------------------
    # Per-candidate pipeline
    # ------------------------------------------------------------------

    def _process(self, candidate: Candidate) -> SplitResult:
        """Reset parts, park the original, split from the backup copy."""
        self._say(f"split: {candidate.path} ({candidate.size} bytes)")
        removed = self._reset(candidate)
        backup_path = self.relocator.relocate(candidate.path, dry_run=self.dry_run)
        if self.dry_run:
            self._say(f"[dry-run] move: {candidate.path} -> {backup_path}")
        else:
            self._say(f"moved: {candidate.path} -> {backup_path}")

        return SplitResult(
            candidate=candidate,
            backup_path=backup_path,
            parts=self._split(candidate, backup_path),
            removed_parts=removed,
        )

    def _resume(self, candidate: Candidate, backup_path: Path) -> SplitResult:
        """Redo the split of an already-parked original."""
        self._say(
            f"resume: {candidate.path} ({candidate.size} bytes) from {backup_path}"
        )
        removed = self._reset(candidate)
        parent = candidate.path.parent
        if not self.fs.is_dir(parent):
            if self.dry_run:
                self._say(f"[dry-run] mkdir: {parent}")
            else:
                self.fs.makedirs(parent)
        return SplitResult(
            candidate=candidate,
            backup_path=backup_path,
            parts=self._split(candidate, backup_path),
            removed_parts=removed,
            resumed=True,
        )

    def _reset(self, candidate: Candidate) -> list[Path]:
        removed = reset_parts(
            self.fs,
            candidate.path.parent,
            candidate.path.name,
            self.config.part_width,
            dry_run=self.dry_run,
        )
        if self.dry_run:
            for part in removed:
                self._say(f"[dry-run] remove: {part}")
        return removed

    def _split(self, candidate: Candidate, backup_path: Path) -> list[PartFile]:
        if self.dry_run:
            parts = self._planned_parts(candidate)
            for part in parts:
                self._say(
                    f"[dry-run] split: {backup_path} -> {part.path} ({part.size} bytes)"
                )
            return parts

        parts = split_file(
            backup_path,
            candidate.path.parent,
            candidate.path.name,
            self.config.chunk_bytes,
            self.config.buffer_bytes,
            self.config.part_width,
            fs=self.fs,
        )
        for part in parts:
            self._say(f"part: {part.path} ({part.size} bytes)")
        return parts

    def _planned_parts(self, candidate: Candidate) -> list[PartFile]:
        """Parts a real run would write, derived from the candidate size."""
        sizes = plan_chunks(candidate.size, self.config.chunk_bytes)
        return [
            PartFile(
                path=candidate.path.parent
                / part_name(candidate.path.name, i, self.config.part_width),
                index=i,
                size=size,
            )
            for i, size in enumerate(sizes, start=1)
        ]
