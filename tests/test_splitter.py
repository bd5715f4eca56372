"""Chunk writer tests.

Part counts and sizes follow ceil(S / C) with a short final part; the
parts always concatenate back to the source bytes.
"""

from __future__ import annotations

import math
from pathlib import Path

import pytest

from relsplit.exceptions import PartLimitExceededError
from relsplit.fs import LocalFileSystem
from relsplit.splitter import split_file


def _rejoin(parts) -> bytes:
    return b"".join(p.path.read_bytes() for p in sorted(parts, key=lambda p: p.index))


@pytest.mark.parametrize(
    ("size", "chunk", "buffer"),
    [
        (1000, 300, 64),   # short final part
        (900, 300, 64),    # exact multiple
        (250, 300, 64),    # smaller than one chunk
        (1000, 300, 1000), # buffer larger than chunk
        (1, 1, 1),
    ],
)
def test_part_sizes_and_rejoin(
    tmp_path: Path, write_bytes, size: int, chunk: int, buffer: int
) -> None:
    source = tmp_path / "src" / "app.bin"
    data = write_bytes(source, size)
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    parts = split_file(source, out_dir, "app.bin", chunk, buffer)

    count = math.ceil(size / chunk)
    assert len(parts) == count
    assert [p.size for p in parts[:-1]] == [chunk] * (count - 1)
    assert parts[-1].size == size - chunk * (count - 1)
    assert [p.path.stat().st_size for p in parts] == [p.size for p in parts]
    assert _rejoin(parts) == data
    assert source.read_bytes() == data


def test_part_names_are_sequential(tmp_path: Path, write_bytes) -> None:
    source = tmp_path / "app.bin"
    write_bytes(source, 25)

    parts = split_file(source, tmp_path, "app.bin", 10, 4)

    assert [p.path.name for p in parts] == [
        "app.bin.part01", "app.bin.part02", "app.bin.part03",
    ]
    assert [p.index for p in parts] == [1, 2, 3]


def test_no_trailing_empty_part(tmp_path: Path, write_bytes) -> None:
    source = tmp_path / "app.bin"
    write_bytes(source, 20)

    split_file(source, tmp_path, "app.bin", 10, 3)

    assert not (tmp_path / "app.bin.part03").exists()


def test_zero_byte_source_writes_nothing(tmp_path: Path, write_bytes) -> None:
    source = tmp_path / "empty.bin"
    source.write_bytes(b"")

    assert split_file(source, tmp_path, "empty.bin", 10, 4) == []
    assert sorted(p.name for p in tmp_path.iterdir()) == ["empty.bin"]


def test_too_many_parts_fails_before_writing(tmp_path: Path, write_bytes) -> None:
    source = tmp_path / "app.bin"
    write_bytes(source, 100)
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    with pytest.raises(PartLimitExceededError):
        split_file(source, out_dir, "app.bin", 1, 1)

    assert list(out_dir.iterdir()) == []


def test_reads_never_exceed_buffer(fs) -> None:
    """Every read asks for at most buffer_bytes."""
    fs.create_file("/src/app.bin", contents=b"z" * 1000)
    requested: list[int] = []

    class SpyReader:
        def __init__(self, handle) -> None:
            self.handle = handle

        def read(self, n=-1):
            requested.append(n)
            return self.handle.read(n)

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            self.handle.close()

    class SpyFileSystem(LocalFileSystem):
        def open_read(self, path):
            return SpyReader(super().open_read(path))

    fs.create_dir("/out")
    parts = split_file(
        Path("/src/app.bin"), Path("/out"), "app.bin", 300, 64, fs=SpyFileSystem()
    )

    assert len(parts) == 4
    assert requested and max(requested) <= 64
    assert -1 not in requested
