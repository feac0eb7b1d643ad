"""Configuration model exports."""

from hostfacts.config.models.observability import LoggingConfig, ObservabilityConfig
from hostfacts.config.models.runtime import RuntimeConfig

__all__ = [
    "LoggingConfig",
    "ObservabilityConfig",
    "RuntimeConfig",
]
