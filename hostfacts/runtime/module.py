"""Custom fact DSL exposed to fact-definition files.

This module is the runtime core library: `RuntimeApi.initialize` loads it,
and every fact file executes with a `FactModule` bound to the global name
`facter`:

    facter.add("role", value="web")

    @facter.fact("kernel_major")
    def kernel_major():
        return facter.value("kernel_release").split(".")[0]
"""

import json
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from hostfacts.exceptions import FactDefinitionError, RuntimeEvalError
from hostfacts.facts.value import DynamicValue
from hostfacts.observability.logging import get_logger
from hostfacts.runtime.api import RuntimeApi

if TYPE_CHECKING:
    from hostfacts.facts.collection import FactCollection

logger = get_logger(__name__)

FACT_FILE_PATTERN = "*.py"


@dataclass
class CustomFact:
    """A fact registered by custom fact code."""

    name: str
    setcode: Callable[[], Any] | None = None
    value: Any = None
    resolved: bool = field(default=False, init=False)
    resolving: bool = field(default=False, init=False)


class FactModule:
    """The `facter` object seen by fact-definition files."""

    def __init__(
        self,
        facts: "FactCollection",
        runtime: RuntimeApi,
        external_paths: Sequence[str] = (),
        load_external: bool = True,
    ) -> None:
        self._facts = facts
        self._runtime = runtime
        self._custom: dict[str, CustomFact] = {}
        self._search_paths: list[str] = []
        self._external_paths: list[str] = list(external_paths)
        self._load_external = load_external
        self._loaded_files: set[Path] = set()

    @property
    def search_paths(self) -> list[str]:
        return list(self._search_paths)

    @property
    def external_paths(self) -> list[str]:
        return list(self._external_paths)

    @property
    def custom_facts(self) -> list[str]:
        """Names of the registered custom facts, in registration order."""
        return list(self._custom)

    def add(
        self,
        name: str,
        value: Any = None,
        *,
        setcode: Callable[[], Any] | None = None,
    ) -> CustomFact:
        """Register a custom fact with a fixed value or a resolution callable.

        Registering a name again replaces the earlier definition.

        Raises:
            FactDefinitionError: If the name is empty or setcode is not callable
        """
        if not isinstance(name, str) or not name:
            raise FactDefinitionError(f"fact name must be a non-empty string, got {name!r}")
        if setcode is not None and not callable(setcode):
            raise FactDefinitionError(f"setcode for fact {name!r} is not callable")

        fact = CustomFact(name=name, setcode=setcode, value=value)
        self._custom[name] = fact
        logger.debug("custom_fact_added", fact=name)
        return fact

    def fact(self, name: str) -> Callable[[Callable[[], Any]], Callable[[], Any]]:
        """Decorator form of `add(name, setcode=func)`."""

        def decorator(func: Callable[[], Any]) -> Callable[[], Any]:
            self.add(name, setcode=func)
            return func

        return decorator

    def value(self, name: str) -> Any:
        """Value of a custom or built-in fact, or None."""
        custom = self._custom.get(name)
        if custom is not None:
            return self._resolve_fact(custom)
        return self._facts.value(name)

    def search(self, *paths: str) -> None:
        """Add directories to search for fact-definition files."""
        self._search_paths.extend(str(path) for path in paths)

    def search_external(self, paths: Iterable[str]) -> None:
        """Replace the directories searched for external fact files."""
        self._external_paths = [str(path) for path in paths]
        self._load_external = True

    def reset(self) -> None:
        """Forget every registered custom fact and search directory."""
        self._custom.clear()
        self._search_paths.clear()
        self._external_paths.clear()
        self._loaded_files.clear()

    def load(self, paths: Iterable[str]) -> None:
        """Search `paths`, then any directories added with `search`, in order.

        Each directory's `*.py` files run in name order. A missing
        directory is skipped; a file that fails is logged and skipped.
        """
        directories = [*(str(path) for path in paths), *self._search_paths]
        for directory in directories:
            base = Path(directory).expanduser()
            if not base.is_dir():
                logger.debug("custom_fact_directory_missing", directory=str(base))
                continue
            for path in sorted(base.glob(FACT_FILE_PATTERN)):
                self._load_file(path)

    def resolve_facts(self) -> None:
        """Resolve every registered fact into the fact collection."""
        if self._load_external:
            self._load_external_facts()

        for fact in list(self._custom.values()):
            value = self._resolve_fact(fact)
            if value is not None:
                self._facts.add(fact.name, DynamicValue(value))

    def _load_file(self, path: Path) -> None:
        resolved = path.resolve()
        if resolved in self._loaded_files:
            return
        self._loaded_files.add(resolved)

        logger.debug("loading_custom_facts", file=str(path))
        try:
            self._runtime.load_file(path, {"facter": self})
        except RuntimeEvalError as exc:
            logger.warning(
                "custom_fact_file_failed",
                file=str(path),
                error=str(exc),
            )

    def _resolve_fact(self, fact: CustomFact) -> Any:
        if fact.resolved:
            return fact.value
        if fact.setcode is None:
            fact.resolved = True
            return fact.value
        if fact.resolving:
            logger.warning("custom_fact_cycle", fact=fact.name)
            return None

        fact.resolving = True
        try:
            fact.value = fact.setcode()
        except (Exception, SystemExit) as exc:
            logger.warning(
                "custom_fact_resolution_failed",
                fact=fact.name,
                error=f"{type(exc).__name__}: {exc}",
                stack_trace=self._runtime.format_exception(exc),
            )
            fact.value = None
        finally:
            fact.resolving = False
        fact.resolved = True
        return fact.value

    def _load_external_facts(self) -> None:
        for directory in self._external_paths:
            base = Path(directory).expanduser()
            if not base.is_dir():
                logger.debug("external_fact_directory_missing", directory=str(base))
                continue
            for path in sorted(base.iterdir()):
                try:
                    facts = _read_external_file(path)
                except (OSError, ValueError) as exc:
                    logger.warning("external_fact_file_failed", file=str(path), error=str(exc))
                    continue
                for name, value in facts.items():
                    self._facts.add(name, value)


def _read_external_file(path: Path) -> dict[str, Any]:
    """Facts defined by an external data file; unknown file types are empty."""
    if path.suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("top-level JSON value must be an object")
        return data
    if path.suffix == ".txt":
        facts: dict[str, Any] = {}
        for line in path.read_text(encoding="utf-8").splitlines():
            key, sep, value = line.partition("=")
            if sep and key.strip():
                facts[key.strip()] = value.strip()
        return facts
    return {}
