"""Data models for the release splitter."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Candidate:
    """A file selected for splitting because it exceeds the size ceiling."""

    path: Path
    size: int


@dataclass(frozen=True, slots=True)
class PartFile:
    """One numbered fragment of a split file."""

    path: Path
    index: int  # 1-based
    size: int


@dataclass
class SplitResult:
    """Outcome of processing one candidate."""

    candidate: Candidate
    backup_path: Path
    parts: list[PartFile] = field(default_factory=list)
    removed_parts: list[Path] = field(default_factory=list)
    resumed: bool = False  # re-split from an existing backup

    @property
    def part_count(self) -> int:
        return len(self.parts)


@dataclass
class RunSummary:
    """Result of one orchestrator run.

    ``skipped_reason`` is set when the run was a no-op before discovery
    (e.g. the release directory does not exist).
    """

    root_dir: Path
    dry_run: bool = False
    candidates: list[Candidate] = field(default_factory=list)
    interrupted: list[Candidate] = field(default_factory=list)
    results: list[SplitResult] = field(default_factory=list)
    skipped_reason: str | None = None

    @property
    def parts_written(self) -> int:
        return sum(r.part_count for r in self.results)

    @property
    def summary(self) -> str:
        """Human-readable summary of the run."""
        return (
            f"candidates={len(self.candidates)}, interrupted={len(self.interrupted)}, "
            f"split={len(self.results)}, "
            f"parts={self.parts_written}, dry_run={self.dry_run}"
        )
