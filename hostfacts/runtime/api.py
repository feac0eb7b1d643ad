"""Handle to the embedded runtime and helpers for its value space.

Values produced by custom fact code are plain objects, classified at
navigation time into a small tagged variant (`ValueKind`). Mapping keys may
be strings or interned `Symbol` instances; a `Symbol` never compares equal
to a `str`, so lookups that need both forms must try each explicitly.
"""

import builtins
import importlib
import sys
import traceback
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import ModuleType
from typing import Any, ClassVar

from hostfacts.exceptions import (
    RuntimeEvalError,
    RuntimeStateError,
    RuntimeUnavailableError,
)
from hostfacts.observability.logging import get_logger

logger = get_logger(__name__)

# Runtime globals backed by the interpreter's standard streams
STREAM_GLOBALS: dict[str, str] = {
    "$stdout": "stdout",
    "$stderr": "stderr",
}


class ValueKind(Enum):
    """Shape of a runtime value, as seen by path navigation."""

    NIL = "nil"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class Symbol:
    """Interned symbolic key.

    There is exactly one instance per name, so identity comparison and
    hashing are enough. `Symbol("os") != "os"`.
    """

    __slots__ = ("name", "__weakref__")

    _table: ClassVar[dict[str, "Symbol"]] = {}

    name: str

    def __new__(cls, name: str) -> "Symbol":
        symbol = cls._table.get(name)
        if symbol is None:
            symbol = super().__new__(cls)
            symbol.name = name
            cls._table[name] = symbol
        return symbol

    def __repr__(self) -> str:
        return f":{self.name}"

    def __str__(self) -> str:
        return self.name

    def __reduce__(self) -> tuple[Any, ...]:
        return (Symbol, (self.name,))


def classify(value: Any) -> ValueKind:
    """Classify a runtime value into its ValueKind."""
    if value is None:
        return ValueKind.NIL
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    return ValueKind.SCALAR


def to_symbol(name: str) -> Symbol:
    """Convert a string to its symbolic key."""
    return Symbol(name)


def hash_lookup(mapping: Mapping[Any, Any], key: Any) -> Any:
    """Look up a key in a runtime mapping, returning None when absent."""
    try:
        return mapping.get(key)
    except TypeError:
        # Unhashable key against a mapping that hashes
        return None


def array_len(sequence: list[Any] | tuple[Any, ...]) -> int:
    """Length of a runtime sequence."""
    return len(sequence)


def ary_entry(sequence: list[Any] | tuple[Any, ...], index: int) -> Any:
    """Element of a runtime sequence; caller guarantees 0 <= index < len."""
    return sequence[index]


def to_native(value: Any) -> Any:
    """Convert a runtime value into plain data (Symbols become strings)."""
    if isinstance(value, Symbol):
        return value.name
    kind = classify(value)
    if kind is ValueKind.SEQUENCE:
        return [to_native(item) for item in value]
    if kind is ValueKind.MAPPING:
        return {str(to_native(key)): to_native(item) for key, item in value.items()}
    return value


class RuntimeApi:
    """Owned handle to one embedded runtime instance.

    The runtime is started once and torn down once; neither step is
    idempotent. Code is executed in namespaces derived from the runtime's
    main namespace so fact files cannot see each other's top-level names.
    """

    def __init__(self, library: str = "hostfacts.runtime.module") -> None:
        self._library_name = library
        self._library: ModuleType | None = None
        self._main: dict[str, Any] | None = None
        self._globals: dict[str, Any] = {}
        self._include_stack_trace = False
        self._shut_down = False

    @property
    def initialized(self) -> bool:
        """Whether the runtime is started and not yet torn down."""
        return self._library is not None

    @property
    def library(self) -> ModuleType:
        """The runtime core library module."""
        self._require_initialized()
        assert self._library is not None
        return self._library

    @property
    def stack_traces_enabled(self) -> bool:
        return self._include_stack_trace

    def initialize(self) -> None:
        """Start the runtime.

        Raises:
            RuntimeStateError: If already started, or started and torn down
            RuntimeUnavailableError: If the core library cannot be loaded
        """
        if self._library is not None:
            raise RuntimeStateError("runtime is already initialized")
        if self._shut_down:
            raise RuntimeStateError("runtime cannot be restarted after uninitialize")

        try:
            library = importlib.import_module(self._library_name)
        except Exception as exc:
            raise RuntimeUnavailableError(
                f"could not load runtime library {self._library_name!r}: {exc}"
            ) from exc

        self._library = library
        self._main = {"__name__": "__hostfacts_main__", "__builtins__": builtins}
        logger.debug("runtime_initialized", library=self._library_name)

    def uninitialize(self) -> None:
        """Tear the runtime down.

        Raises:
            RuntimeStateError: If the runtime is not running
        """
        self._require_initialized()
        self._library = None
        self._main = None
        self._globals.clear()
        self._shut_down = True
        logger.debug("runtime_uninitialized", library=self._library_name)

    def include_stack_trace(self, enabled: bool) -> None:
        """Attach formatted stack traces to errors raised by runtime code."""
        self._include_stack_trace = enabled

    def eval(
        self,
        source: str,
        bindings: Mapping[str, Any] | None = None,
        filename: str = "<runtime>",
    ) -> dict[str, Any]:
        """Execute source code inside the runtime.

        Args:
            source: Code to execute
            bindings: Names made visible to the code
            filename: Name reported in tracebacks

        Returns:
            The namespace the code executed in

        Raises:
            RuntimeEvalError: If the code fails to compile or raises
        """
        self._require_initialized()
        assert self._main is not None
        namespace = dict(self._main)
        namespace["__file__"] = filename
        if bindings:
            namespace.update(bindings)

        try:
            code = compile(source, filename, "exec")
            exec(code, namespace)  # noqa: S102
        except (Exception, SystemExit) as exc:
            raise self._eval_error(exc, filename) from exc
        return namespace

    def load_file(
        self, path: str | Path, bindings: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Execute a source file inside the runtime."""
        path = Path(path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise RuntimeEvalError(f"could not read {path}: {exc}") from exc
        return self.eval(source, bindings, filename=str(path))

    def gv_get(self, name: str) -> Any:
        """Read a runtime global variable."""
        self._require_initialized()
        stream = STREAM_GLOBALS.get(name)
        if stream is not None:
            return getattr(sys, stream)
        return self._globals.get(name)

    def gv_set(self, name: str, value: Any) -> None:
        """Assign a runtime global variable."""
        self._require_initialized()
        stream = STREAM_GLOBALS.get(name)
        if stream is not None:
            setattr(sys, stream, value)
            return
        self._globals[name] = value

    def format_exception(self, exc: BaseException) -> str | None:
        """Formatted traceback for `exc` when stack traces are enabled."""
        if not self._include_stack_trace:
            return None
        return "".join(traceback.format_exception(exc)).rstrip()

    def _eval_error(self, exc: BaseException, filename: str) -> RuntimeEvalError:
        return RuntimeEvalError(
            f"{filename}: {type(exc).__name__}: {exc}",
            stack_trace=self.format_exception(exc),
        )

    def _require_initialized(self) -> None:
        if self._library is None:
            raise RuntimeStateError("runtime is not initialized")
