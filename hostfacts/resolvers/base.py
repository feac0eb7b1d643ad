"""Base class for resolver groups."""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from hostfacts.observability.logging import get_logger

logger = get_logger(__name__)


class BaseResolver(ABC):
    """A lazily collected, memoized cluster of related facts.

    The store is per class and lives for the whole process. The first
    `resolve` call for any fact the group owns runs `_collect`, which fills
    the store for the whole cluster; later calls are served from the store.
    A name `_collect` did not produce returns None and is not remembered,
    so asking again runs the pass again. `invalidate_cache` is the explicit
    reset.
    """

    fact_names: ClassVar[tuple[str, ...]] = ()

    _fact_list: ClassVar[dict[str, Any]]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._fact_list = {}

    @classmethod
    def resolve(cls, fact_name: str) -> Any:
        """Value of `fact_name`, collecting the group on a miss."""
        if fact_name in cls._fact_list:
            return cls._fact_list[fact_name]

        logger.debug("resolver_collecting", resolver=cls.__name__, fact=fact_name)
        try:
            cls._collect()
        except OSError as exc:
            logger.debug(
                "resolver_probe_failed",
                resolver=cls.__name__,
                fact=fact_name,
                error=str(exc),
            )
        return cls._fact_list.get(fact_name)

    @classmethod
    def invalidate_cache(cls) -> None:
        """Forget every collected value."""
        cls._fact_list = {}

    @classmethod
    @abstractmethod
    def _collect(cls) -> None:
        """Probe the host and populate `cls._fact_list`."""
        pass
