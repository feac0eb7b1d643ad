"""Tests for the OsRelease resolver group."""

from pathlib import Path

import pytest

from hostfacts.resolvers.os_release import OsRelease, parse_os_release

OS_RELEASE = """\
# Distribution identification
NAME="Ubuntu"
VERSION_ID="24.04"
ID=ubuntu
PRETTY_NAME='Ubuntu 24.04 LTS'
"""


class TestParseOsRelease:
    """Tests for parse_os_release."""

    def test_parses_and_unquotes(self) -> None:
        assert parse_os_release(OS_RELEASE) == {
            "name": "Ubuntu",
            "version_id": "24.04",
            "id": "ubuntu",
            "pretty_name": "Ubuntu 24.04 LTS",
        }

    def test_ignores_malformed_lines(self) -> None:
        assert parse_os_release("garbage\n\n#x=y\n") == {}


class TestOsRelease:
    """Tests for OsRelease."""

    @pytest.fixture(autouse=True)
    def release_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        path = tmp_path / "os-release"
        path.write_text(OS_RELEASE)
        monkeypatch.setattr(OsRelease, "OS_RELEASE_FILE", str(path))
        return path

    def test_publishes_group(self) -> None:
        assert OsRelease.resolve("os_name") == "Ubuntu"
        assert OsRelease.resolve("os_version") == "24.04"
        assert OsRelease.resolve("os_id") == "ubuntu"
        assert OsRelease.resolve("os_release")["pretty_name"] == "Ubuntu 24.04 LTS"

    def test_missing_file_publishes_nothing(self, release_file: Path) -> None:
        release_file.unlink()
        assert OsRelease.resolve("os_name") is None
