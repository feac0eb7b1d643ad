"""The shared fact store."""

from collections.abc import Iterable, Iterator
from typing import Any

from hostfacts.facts.lookup import lookup
from hostfacts.facts.value import DynamicValue, parse_query
from hostfacts.observability.logging import get_logger
from hostfacts.resolvers.base import BaseResolver

logger = get_logger(__name__)


class FactCollection:
    """Name -> value store for every fact known to the process.

    Built-in facts come from resolver groups registered with `register`
    and are resolved on first access. Custom facts are added directly by
    the runtime bridge. Each fact is resolved at most once until `clear`.
    """

    def __init__(self) -> None:
        self._facts: dict[str, DynamicValue] = {}
        self._resolvers: dict[str, type[BaseResolver]] = {}

    def register(self, resolver: type[BaseResolver], fact_names: Iterable[str]) -> None:
        """Make `resolver` the owner of `fact_names`."""
        for name in fact_names:
            self._resolvers[name] = resolver

    def add(self, name: str, value: Any) -> None:
        """Add or replace a fact. A None value removes the fact."""
        if value is None:
            self.remove(name)
            return
        if not isinstance(value, DynamicValue):
            value = DynamicValue(value)
        elif not value.is_root:
            value = DynamicValue(value.value)
        self._facts[name] = value

    def remove(self, name: str) -> None:
        self._facts.pop(name, None)

    def get(self, name: str) -> DynamicValue | None:
        """Get a fact, resolving it through its resolver group if needed."""
        fact = self._facts.get(name)
        if fact is not None:
            return fact

        resolver = self._resolvers.get(name)
        if resolver is None:
            return None

        value = resolver.resolve(name)
        if value is None:
            logger.debug("fact_not_resolved", fact=name, resolver=resolver.__name__)
            return None
        self.add(name, value)
        return self._facts[name]

    def value(self, name: str) -> Any:
        """Raw value of a fact, or None."""
        fact = self.get(name)
        return None if fact is None else fact.value

    def query(self, query: str) -> DynamicValue | None:
        """Resolve a dotted query such as `mountpoints.0.path`.

        The first segment names the fact; the rest is looked up inside its
        value.
        """
        name, *path = parse_query(query)
        fact = self.get(name)
        if fact is None:
            return None
        return lookup(fact, path)

    def resolve_all(self) -> None:
        """Resolve every registered fact."""
        for name in list(self._resolvers):
            self.get(name)

    def names(self) -> list[str]:
        """Names of the facts resolved so far, sorted."""
        return sorted(self._facts)

    def to_dict(self) -> dict[str, Any]:
        """Resolve everything and return plain data keyed by fact name."""
        self.resolve_all()
        return {name: self._facts[name].to_native() for name in self.names()}

    def clear(self) -> None:
        """Drop every fact and invalidate the registered resolver groups."""
        self._facts.clear()
        for resolver in set(self._resolvers.values()):
            resolver.invalidate_cache()

    def __contains__(self, name: object) -> bool:
        return name in self._facts

    def __len__(self) -> int:
        return len(self._facts)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
