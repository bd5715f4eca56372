"""Part naming, part-set discovery, stale-part reset, and chunk planning.

Directory-level tests run on pyfakefs.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from relsplit.exceptions import ConfigurationError, PartLimitExceededError
from relsplit.fs import LocalFileSystem
from relsplit.parts import (
    check_part_limit,
    is_part_file,
    is_part_of,
    list_existing_parts,
    part_name,
    plan_chunks,
    reset_parts,
)


class TestNaming:
    def test_two_digit_padding(self) -> None:
        assert part_name("app.bin", 1) == "app.bin.part01"
        assert part_name("app.bin", 42) == "app.bin.part42"

    def test_custom_width(self) -> None:
        assert part_name("app.bin", 7, width=3) == "app.bin.part007"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("app.bin.part01", True),
            ("app.bin.PART99", True),
            ("app.bin", False),
            ("app.bin.part1", False),
            ("app.bin.part001", False),
            ("app.part01.bin", False),
        ],
    )
    def test_is_part_file(self, name: str, expected: bool) -> None:
        assert is_part_file(name) is expected

    def test_is_part_of_requires_exact_base(self) -> None:
        assert is_part_of("app.bin.part01", "app.bin")
        assert is_part_of("app.bin.Part02", "app.bin")
        assert not is_part_of("app.bin.partial.part01", "app.bin")
        assert not is_part_of("xapp.bin.part01", "app.bin")


class TestListAndReset:
    def test_lists_only_matching_parts_sorted(self, fs) -> None:
        for name in ("app.bin.part02", "app.bin.part01", "app.bin.part10",
                     "other.bin.part01", "app.bin", "app.bin.part1"):
            fs.create_file(f"/rel/{name}", contents="x")

        parts = list_existing_parts(LocalFileSystem(), Path("/rel"), "app.bin")

        assert [p.name for p in parts] == [
            "app.bin.part01", "app.bin.part02", "app.bin.part10",
        ]

    def test_missing_directory_has_no_parts(self, fs) -> None:
        assert list_existing_parts(LocalFileSystem(), Path("/nope"), "a") == []

    def test_reset_removes_parts_only(self, fs) -> None:
        fs.create_file("/rel/app.bin.part01", contents="a")
        fs.create_file("/rel/app.bin.part02", contents="b")
        fs.create_file("/rel/keep.txt", contents="c")

        removed = reset_parts(LocalFileSystem(), Path("/rel"), "app.bin")

        assert len(removed) == 2
        assert not Path("/rel/app.bin.part01").exists()
        assert not Path("/rel/app.bin.part02").exists()
        assert Path("/rel/keep.txt").exists()

    def test_reset_dry_run_keeps_parts(self, fs) -> None:
        fs.create_file("/rel/app.bin.part01", contents="a")

        removed = reset_parts(LocalFileSystem(), Path("/rel"), "app.bin", dry_run=True)

        assert removed == [Path("/rel/app.bin.part01")]
        assert Path("/rel/app.bin.part01").exists()

    def test_remove_missing_is_not_an_error(self, fs) -> None:
        assert LocalFileSystem().remove(Path("/rel/gone.part01")) is False


class TestPlanChunks:
    @pytest.mark.parametrize(
        ("total", "chunk", "expected"),
        [
            (0, 10, []),
            (5, 10, [5]),
            (10, 10, [10]),
            (25, 10, [10, 10, 5]),
            (30, 10, [10, 10, 10]),
            (210, 95, [95, 95, 20]),
            (210, 150, [150, 60]),
        ],
    )
    def test_sizes(self, total: int, chunk: int, expected: list[int]) -> None:
        assert plan_chunks(total, chunk) == expected


class TestPartLimit:
    def test_within_limit(self) -> None:
        assert check_part_limit("f", 99 * 10, 10) == 99

    def test_exceeding_two_digits_fails_fast(self) -> None:
        with pytest.raises(PartLimitExceededError) as exc_info:
            check_part_limit("f", 100 * 10, 10)
        assert exc_info.value.needed == 100
        assert exc_info.value.limit == 99
        assert isinstance(exc_info.value, ConfigurationError)

    def test_wider_numbers_raise_the_limit(self) -> None:
        assert check_part_limit("f", 100 * 10, 10, width=3) == 100
