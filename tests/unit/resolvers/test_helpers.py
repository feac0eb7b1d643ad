"""Tests for resolver probing helpers."""

from pathlib import Path

import pytest

from hostfacts.resolvers.helpers import (
    MountEntry,
    bytes_to_human_readable,
    compute_capacity,
    read_mountpoints,
    safe_read,
)


class TestBytesToHumanReadable:
    """Tests for bytes_to_human_readable."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, "0 bytes"),
            (1023, "1023 bytes"),
            (1024, "1.00 KiB"),
            (1536, "1.50 KiB"),
            (1073741824, "1.00 GiB"),
            (1024**4 * 3, "3.00 TiB"),
        ],
    )
    def test_formats(self, value: int, expected: str) -> None:
        assert bytes_to_human_readable(value) == expected

    def test_rounds_up_to_next_unit(self) -> None:
        """A value that rounds to 1024 of a unit is shown in the next unit."""
        assert bytes_to_human_readable(1024**2 - 1) == "1.00 MiB"

    def test_none(self) -> None:
        assert bytes_to_human_readable(None) is None


class TestComputeCapacity:
    """Tests for compute_capacity."""

    def test_full(self) -> None:
        assert compute_capacity(100, 100) == "100%"

    def test_partial(self) -> None:
        assert compute_capacity(1, 3) == "33.33%"

    def test_empty(self) -> None:
        assert compute_capacity(0, 100) == "0%"


class TestReadMountpoints:
    """Tests for read_mountpoints."""

    def test_parses_mount_table(self, tmp_path: Path) -> None:
        mounts = tmp_path / "mounts"
        mounts.write_text(
            "/dev/sda1 / ext4 rw,relatime 0 0\n"
            "tmpfs /mnt/my\\040disk tmpfs rw 0 0\n"
            "garbage\n"
        )

        assert read_mountpoints(mounts) == [
            MountEntry("/dev/sda1", "/", "ext4", "rw,relatime"),
            MountEntry("tmpfs", "/mnt/my disk", "tmpfs", "rw"),
        ]

    def test_missing_table_is_empty(self, tmp_path: Path) -> None:
        assert read_mountpoints(tmp_path / "absent") == []


class TestSafeRead:
    """Tests for safe_read."""

    def test_default_on_missing(self, tmp_path: Path) -> None:
        assert safe_read(tmp_path / "absent", default="x") == "x"
