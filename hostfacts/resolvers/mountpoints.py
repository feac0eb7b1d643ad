"""Mounted filesystem facts (Linux)."""

import re
from typing import Any, ClassVar

from hostfacts.observability.logging import get_logger
from hostfacts.resolvers import helpers
from hostfacts.resolvers.base import BaseResolver

logger = get_logger(__name__)

_ROOT_DEVICE = re.compile(r"root=(\S+)")


class Mountpoints(BaseResolver):
    """Collects the `mountpoints` fact: one mapping per mounted filesystem."""

    fact_names: ClassVar[tuple[str, ...]] = ("mountpoints",)

    MOUNTS_FILE: ClassVar[str] = "/proc/mounts"
    CMDLINE_FILE: ClassVar[str] = "/proc/cmdline"

    @classmethod
    def _collect(cls) -> None:
        mounts: list[dict[str, Any]] = []
        for entry in helpers.read_mountpoints(cls.MOUNTS_FILE):
            try:
                stats = helpers.read_mountpoint_stats(entry.mount_point)
            except OSError as exc:
                logger.debug(
                    "mountpoint_stats_unavailable",
                    path=entry.mount_point,
                    error=str(exc),
                )
                continue
            mounts.append(cls._describe(entry, stats))

        cls._fact_list["mountpoints"] = mounts

    @classmethod
    def _describe(cls, entry: helpers.MountEntry, stats: helpers.MountStats) -> dict[str, Any]:
        size_bytes = abs(stats.bytes_total)
        available_bytes = abs(stats.bytes_available)
        used_bytes = abs(stats.bytes_used)
        total_bytes = used_bytes + available_bytes

        values = {
            "device": cls._compute_device(entry.device),
            "filesystem": entry.fs_type,
            "path": entry.mount_point,
            "options": [option.strip() for option in entry.options.split(",")],
            "available": helpers.bytes_to_human_readable(available_bytes),
            "available_bytes": available_bytes,
            "size": helpers.bytes_to_human_readable(size_bytes),
            "size_bytes": size_bytes,
            "used": helpers.bytes_to_human_readable(used_bytes),
            "used_bytes": used_bytes,
            "capacity": helpers.compute_capacity(used_bytes, total_bytes),
        }
        return {key: values[key] for key in helpers.MOUNT_KEYS}

    @classmethod
    def _compute_device(cls, device: str) -> str:
        # Not every system symlinks /dev/root; ask the kernel command line
        if device != "/dev/root":
            return device
        match = _ROOT_DEVICE.search(helpers.safe_read(cls.CMDLINE_FILE))
        return match.group(1) if match else device
