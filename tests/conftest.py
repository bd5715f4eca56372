"""Shared pytest fixtures for release splitter tests.

Provides a release tree on real disk, a Rich console that records its
output, a config factory, and a filesystem wrapper that records every
mutating call so dry runs can be checked for side effects.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from relsplit.config import RunConfiguration
from relsplit.fs import LocalFileSystem

class RecordingFileSystem:
    """Wraps a FileSystem and logs each call that would change the disk."""

    MUTATING = frozenset({"open_write", "makedirs", "remove", "replace"})

    def __init__(self, inner=None) -> None:
        self.inner = inner or LocalFileSystem()
        self.mutations: list[tuple[str, tuple]] = []

    def __getattr__(self, name):
        attr = getattr(self.inner, name)
        if name not in self.MUTATING:
            return attr

        def recorded(*args, **kwargs):
            self.mutations.append((name, args))
            return attr(*args, **kwargs)

        return recorded


class FailingFileSystem(LocalFileSystem):
    """LocalFileSystem that raises on the Nth part file opened for writing."""

    def __init__(self, fail_on_write: int) -> None:
        self.fail_on_write = fail_on_write
        self.writes = 0

    def open_write(self, path: Path):
        self.writes += 1
        if self.writes == self.fail_on_write:
            raise OSError(28, "No space left on device", str(path))
        return super().open_write(path)


def _write_bytes(path: Path, size: int, seed: int = 0) -> bytes:
    path.parent.mkdir(parents=True, exist_ok=True)
    data = bytes((i * 31 + seed) % 251 for i in range(size))
    path.write_bytes(data)
    return data


@pytest.fixture
def write_bytes():
    """Writer creating a file of *size* bytes whose content varies with *seed*.

    Returns the bytes written: ``data = write_bytes(path, size, seed=0)``.
    """
    return _write_bytes


@pytest.fixture
def recording_fs() -> RecordingFileSystem:
    """Local filesystem that records every mutating call in ``.mutations``."""
    return RecordingFileSystem()


@pytest.fixture
def failing_fs():
    """Factory: ``failing_fs(n)`` fails the nth part file opened for writing."""
    return FailingFileSystem


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Repository root containing an empty ``release/`` directory."""
    root = tmp_path / "repo"
    (root / "release").mkdir(parents=True)
    return root


@pytest.fixture
def make_config(repo: Path):
    """Factory for a RunConfiguration rooted at the temp repo.

    Sizes are scaled down to KiB so the 100 MiB / 95 MiB defaults become
    100 KiB / 95 KiB.
    """

    def _make(**overrides) -> RunConfiguration:
        kwargs = dict(
            root_dir=repo / "release",
            repo_root=repo,
            max_bytes=100 * 1024,
            chunk_bytes=95 * 1024,
            buffer_bytes=8 * 1024,
        )
        kwargs.update(overrides)
        return RunConfiguration(**kwargs).validate()

    return _make


@pytest.fixture
def console() -> Console:
    """Console writing to an in-memory buffer; read it with ``console.file.getvalue()``."""
    return Console(file=io.StringIO(), width=400, color_system=None)
