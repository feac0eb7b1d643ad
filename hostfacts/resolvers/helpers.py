"""Probing helpers shared by resolver groups."""

import math
import os
import re
from dataclasses import dataclass
from pathlib import Path

MOUNT_KEYS: tuple[str, ...] = (
    "device",
    "filesystem",
    "path",
    "options",
    "available",
    "available_bytes",
    "size",
    "size_bytes",
    "used",
    "used_bytes",
    "capacity",
)

_BINARY_UNITS: tuple[str, ...] = ("KiB", "MiB", "GiB", "TiB", "PiB", "EiB")

# /proc/mounts escapes whitespace and backslashes as \ooo
_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


@dataclass(frozen=True)
class MountEntry:
    """One line of the mount table."""

    device: str
    mount_point: str
    fs_type: str
    options: str


@dataclass(frozen=True)
class MountStats:
    """Space usage of a mounted filesystem, in bytes."""

    bytes_total: int
    bytes_available: int
    bytes_used: int


def safe_read(path: str | Path, default: str = "") -> str:
    """Read a text file, returning `default` when it cannot be read."""
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return default


def _unescape(field: str) -> str:
    return _OCTAL_ESCAPE.sub(lambda match: chr(int(match.group(1), 8)), field)


def read_mountpoints(mounts_file: str | Path = "/proc/mounts") -> list[MountEntry]:
    """Parse the mount table."""
    entries: list[MountEntry] = []
    for line in safe_read(mounts_file).splitlines():
        fields = line.split()
        if len(fields) < 4:
            continue
        device, mount_point, fs_type, options = fields[:4]
        entries.append(
            MountEntry(
                device=_unescape(device),
                mount_point=_unescape(mount_point),
                fs_type=fs_type,
                options=options,
            )
        )
    return entries


def read_mountpoint_stats(path: str) -> MountStats:
    """Space usage of the filesystem mounted at `path`.

    Raises:
        OSError: If the mount point cannot be queried
    """
    stats = os.statvfs(path)
    return MountStats(
        bytes_total=stats.f_blocks * stats.f_frsize,
        bytes_available=stats.f_bavail * stats.f_frsize,
        bytes_used=(stats.f_blocks - stats.f_bfree) * stats.f_frsize,
    )


def compute_capacity(used: int, total: int) -> str:
    """Used space as a percentage string, e.g. "42.17%"."""
    if used == total:
        return "100%"
    if used > 0:
        return f"{100.0 * used / total:.2f}%"
    return "0%"


def bytes_to_human_readable(value: int | None) -> str | None:
    """Format a byte count with binary units, e.g. 1536 -> "1.50 KiB"."""
    if value is None:
        return None
    if value < 1024:
        return f"{value} bytes"

    exponent = min(int(math.log2(value) // 10), len(_BINARY_UNITS))
    number = value / 1024**exponent
    if round(number, 2) >= 1024 and exponent < len(_BINARY_UNITS):
        exponent += 1
        number = value / 1024**exponent
    return f"{number:.2f} {_BINARY_UNITS[exponent - 1]}"
