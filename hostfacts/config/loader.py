"""Locating and reading the hostfacts TOML configuration.

A config directory holds `default.toml` and optional per-environment
overlays (`production.toml`, `development.toml`, ...). Both are optional:
a host with no configuration runs entirely on model defaults.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from hostfacts.observability.logging import get_logger

logger = get_logger(__name__)

CONFIG_DIR_ENV = "HOSTFACTS_CONFIG_DIR"
ENVIRONMENT_ENV = "HOSTFACTS_ENV"
DEFAULT_ENVIRONMENT = "production"

# Checked after the working tree, for installed hosts
SYSTEM_CONFIG_DIR = Path("/etc/hostfacts")

# Parent directories searched for a project-local config/ directory
_SEARCH_DEPTH = 5


def find_config_dir() -> Path | None:
    """Find the directory holding the TOML files.

    Order: $HOSTFACTS_CONFIG_DIR, a `config/` directory in the working
    directory or one of its parents, then SYSTEM_CONFIG_DIR.

    Returns:
        The directory, or None when no configuration exists

    Raises:
        FileNotFoundError: If $HOSTFACTS_CONFIG_DIR names a missing directory
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_ENV} is not a directory: {explicit}")
        return path

    current = Path.cwd()
    for directory in [current, *current.parents][:_SEARCH_DEPTH]:
        candidate = directory / "config"
        if candidate.is_dir():
            return candidate

    if SYSTEM_CONFIG_DIR.is_dir():
        return SYSTEM_CONFIG_DIR

    logger.debug("config_dir_not_found", cwd=str(current))
    return None


def get_environment() -> str:
    """Name of the environment overlay to apply."""
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Read one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge `override` into a copy of `base`; nested tables merge recursively."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def config_files(config_dir: Path, environment: str) -> list[Path]:
    """The files of `config_dir` that apply to `environment`, lowest priority first."""
    candidates = [config_dir / "default.toml", config_dir / f"{environment}.toml"]
    return [path for path in candidates if path.is_file()]


def load_config() -> dict[str, Any]:
    """Read and merge every applicable TOML file.

    Returns:
        Merged configuration; empty when no configuration exists
    """
    config_dir = find_config_dir()
    if config_dir is None:
        return {}

    files = config_files(config_dir, get_environment())
    config: dict[str, Any] = {}
    for path in files:
        config = deep_merge(config, load_toml(path))

    logger.debug(
        "config_loaded",
        config_dir=str(config_dir),
        files=[path.name for path in files],
    )
    return config
