"""Operating system identification facts from os-release."""

from typing import ClassVar

from hostfacts.resolvers import helpers
from hostfacts.resolvers.base import BaseResolver


class OsRelease(BaseResolver):
    """Collects `os_release` and the `os_name`, `os_version`, `os_id` facts."""

    fact_names: ClassVar[tuple[str, ...]] = ("os_release", "os_name", "os_version", "os_id")

    OS_RELEASE_FILE: ClassVar[str] = "/etc/os-release"

    @classmethod
    def _collect(cls) -> None:
        release = parse_os_release(helpers.safe_read(cls.OS_RELEASE_FILE))
        if not release:
            return

        cls._fact_list["os_release"] = release
        for fact, field in (("os_name", "name"), ("os_version", "version_id"), ("os_id", "id")):
            if field in release:
                cls._fact_list[fact] = release[field]


def parse_os_release(content: str) -> dict[str, str]:
    """Parse os-release `KEY=value` lines into a dict with lowercase keys."""
    release: dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        release[key.strip().lower()] = value
    return release
