"""Bootstrap module wiring the fact engine together from configuration.

Handles:
- Configuring logging
- Building a FactCollection with the built-in resolver groups
- Starting the embedded runtime and loading custom facts
- Tearing the runtime down exactly once

Example usage:

    from hostfacts.bootstrap import fact_session

    with fact_session() as facts:
        print(facts.query("mountpoints.0.path"))
"""

from collections.abc import Iterator
from contextlib import contextmanager

from hostfacts.config import Settings, get_settings
from hostfacts.facts.collection import FactCollection
from hostfacts.observability.logging import get_logger, setup_logging
from hostfacts.resolvers import BUILTIN_RESOLVERS
from hostfacts.runtime.api import RuntimeApi
from hostfacts.runtime.bridge import RuntimeBridge

logger = get_logger(__name__)


def build_collection() -> FactCollection:
    """Create a FactCollection with every built-in resolver registered."""
    facts = FactCollection()
    for resolver in BUILTIN_RESOLVERS:
        facts.register(resolver, resolver.fact_names)
    return facts


@contextmanager
def fact_session(
    settings: Settings | None = None,
    configure_logging: bool = True,
) -> Iterator[FactCollection]:
    """Yield a FactCollection with custom facts loaded.

    The embedded runtime is started on entry (when enabled) and torn down
    on exit, whatever happens inside the block.

    Args:
        settings: Configuration to use (default: get_settings())
        configure_logging: Whether to apply the logging configuration
    """
    settings = settings or get_settings()
    runtime_config = settings.runtime

    if configure_logging:
        log_config = settings.observability.logging
        setup_logging(
            level=log_config.level,
            format=log_config.format,
            redact_sensitive=log_config.redact_sensitive,
        )

    facts = build_collection()
    if not runtime_config.enabled:
        logger.info("runtime_disabled", reason="config")
        yield facts
        return

    bridge = RuntimeBridge(
        RuntimeApi(runtime_config.library),
        framework_module=runtime_config.framework_module,
    )
    if not bridge.initialize(runtime_config.include_stack_trace):
        yield facts
        return

    try:
        bridge.load_custom_facts(
            facts,
            initialize_framework=runtime_config.initialize_framework,
            redirect_stdout=runtime_config.redirect_stdout,
            paths=runtime_config.custom_fact_dirs,
            external_paths=runtime_config.external_fact_dirs,
        )
        yield facts
    finally:
        bridge.uninitialize()
