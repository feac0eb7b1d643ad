"""Tests for the Mountpoints resolver group."""

from pathlib import Path

import pytest

from hostfacts.resolvers import helpers
from hostfacts.resolvers.mountpoints import Mountpoints

GIB = 1024**3


@pytest.fixture
def mount_table(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the resolver at a fake mount table and kernel command line."""
    mounts = tmp_path / "mounts"
    mounts.write_text(
        "/dev/root / ext4 rw,relatime 0 0\n"
        "/dev/sdb1 /data xfs rw 0 0\n"
        "proc /proc proc rw 0 0\n"
    )
    cmdline = tmp_path / "cmdline"
    cmdline.write_text("BOOT_IMAGE=/vmlinuz root=/dev/nvme0n1p2 ro quiet\n")
    monkeypatch.setattr(Mountpoints, "MOUNTS_FILE", str(mounts))
    monkeypatch.setattr(Mountpoints, "CMDLINE_FILE", str(cmdline))
    return mounts


@pytest.fixture
def fake_stats(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Replace statvfs-backed stats; /proc cannot be queried."""
    queried: list[str] = []

    def _stats(path: str) -> helpers.MountStats:
        queried.append(path)
        if path == "/proc":
            raise PermissionError(path)
        return helpers.MountStats(bytes_total=4 * GIB, bytes_available=3 * GIB, bytes_used=GIB)

    monkeypatch.setattr(helpers, "read_mountpoint_stats", _stats)
    return queried


class TestMountpoints:
    """Tests for Mountpoints."""

    def test_collects_every_readable_mount(self, mount_table: Path, fake_stats: list[str]) -> None:
        mounts = Mountpoints.resolve("mountpoints")

        assert [mount["path"] for mount in mounts] == ["/", "/data"]
        assert fake_stats == ["/", "/data", "/proc"]

    def test_describes_mount(self, mount_table: Path, fake_stats: list[str]) -> None:
        root = Mountpoints.resolve("mountpoints")[0]

        assert root == {
            "device": "/dev/nvme0n1p2",
            "filesystem": "ext4",
            "path": "/",
            "options": ["rw", "relatime"],
            "available": "3.00 GiB",
            "available_bytes": 3 * GIB,
            "size": "4.00 GiB",
            "size_bytes": 4 * GIB,
            "used": "1.00 GiB",
            "used_bytes": GIB,
            "capacity": "25.00%",
        }

    def test_keys_follow_mount_keys(self, mount_table: Path, fake_stats: list[str]) -> None:
        mount = Mountpoints.resolve("mountpoints")[1]
        assert tuple(mount) == helpers.MOUNT_KEYS

    def test_probe_runs_once(self, mount_table: Path, fake_stats: list[str]) -> None:
        first = Mountpoints.resolve("mountpoints")
        second = Mountpoints.resolve("mountpoints")

        assert second is first
        assert len(fake_stats) == 3
