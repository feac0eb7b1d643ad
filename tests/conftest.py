"""Shared test fixtures for the hostfacts test suite."""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog
from structlog.testing import LogCapture

from hostfacts.resolvers import BUILTIN_RESOLVERS
from hostfacts.runtime.api import RuntimeApi


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "[runtime]\nenabled = true",
                "development.toml": "[observability.logging]\nlevel = 'DEBUG'",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


@pytest.fixture
def write_fact_file(tmp_path: Path) -> Callable[[str, str, str], Path]:
    """Factory fixture writing a custom fact file and returning its directory.

    Usage:
        def test_something(write_fact_file):
            facts_dir = write_fact_file("facts.d", "role.py", "facter.add('role', 'web')")
    """

    def _write(directory: str, filename: str, source: str) -> Path:
        fact_dir = tmp_path / directory
        fact_dir.mkdir(parents=True, exist_ok=True)
        (fact_dir / filename).write_text(source)
        return fact_dir

    return _write


@pytest.fixture
def runtime() -> Generator[RuntimeApi, None, None]:
    """An initialized runtime, torn down after the test if still running."""
    api = RuntimeApi()
    api.initialize()
    yield api
    if api.initialized:
        api.uninitialize()


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache and TOML source before and after each test."""
    from hostfacts.config import get_settings
    from hostfacts.config.settings import set_toml_config

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


@pytest.fixture(autouse=True)
def reset_resolver_groups() -> Generator[None, None, None]:
    """Built-in resolver stores are per process; start every test empty."""
    for resolver in BUILTIN_RESOLVERS:
        resolver.invalidate_cache()
    yield
    for resolver in BUILTIN_RESOLVERS:
        resolver.invalidate_cache()


@pytest.fixture(autouse=True)
def log_capture() -> Generator[LogCapture, None, None]:
    """Capture structlog events instead of printing them."""
    capture = LogCapture()
    structlog.configure(processors=[capture], cache_logger_on_first_use=False)
    yield capture
    structlog.reset_defaults()
