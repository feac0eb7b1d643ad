"""Fact values and dotted path keys."""

from collections.abc import Sequence
from typing import Any

from hostfacts.runtime.api import ValueKind, classify, to_native


def make_key(segments: Sequence[str]) -> str:
    """Build the cache key for a path.

    Segments are joined with "."; a segment containing "." is wrapped in
    double quotes so `["a", "b.c"]` and `["a", "b", "c"]` stay distinct.
    """
    return ".".join(f'"{segment}"' if "." in segment else segment for segment in segments)


def parse_query(query: str) -> list[str]:
    """Split a dotted query into segments.

    Double quotes protect dots inside a segment: `a."b.c".d` gives
    `["a", "b.c", "d"]`. The quotes themselves are dropped.
    """
    segments: list[str] = []
    current: list[str] = []
    quoted = False
    for char in query:
        if char == '"':
            quoted = not quoted
        elif char == "." and not quoted:
            segments.append("".join(current))
            current = []
        else:
            current.append(char)
    segments.append("".join(current))
    return segments


class DynamicValue:
    """Handle to a fact value in the runtime's value space.

    A root handle owns a cache of child handles keyed by path key. Children
    reference a value inside the root's value and carry their key and
    segments; they never hold a cache of their own, and they live as long
    as their root does.
    """

    __slots__ = ("_value", "_key", "_segments", "_root", "_children")

    def __init__(
        self,
        value: Any,
        key: str = "",
        segments: Sequence[str] = (),
        root: "DynamicValue | None" = None,
    ) -> None:
        self._value = value
        self._key = key
        self._segments = tuple(segments)
        self._root = root
        self._children: dict[str, DynamicValue] | None = {} if root is None else None

    @property
    def value(self) -> Any:
        return self._value

    @property
    def key(self) -> str:
        """Path key relative to the root ("" for the root itself)."""
        return self._key

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def root(self) -> "DynamicValue":
        return self if self._root is None else self._root

    @property
    def is_root(self) -> bool:
        return self._root is None

    @property
    def kind(self) -> ValueKind:
        return classify(self._value)

    def child(self, key: str) -> "DynamicValue | None":
        """Cached child for `key`, if a lookup already produced one."""
        if self._children is None:
            return None
        return self._children.get(key)

    def wrap_child(self, value: Any, key: str, segments: Sequence[str]) -> "DynamicValue":
        """Create a child handle for `value` and cache it under `key`."""
        if self._children is None:
            raise ValueError("only a root value can own children")
        child = DynamicValue(value, key, segments, root=self)
        self._children[key] = child
        return child

    def to_native(self) -> Any:
        """Plain-data copy of the value."""
        return to_native(self._value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DynamicValue):
            return bool(self._value == other._value)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._root is None:
            return f"DynamicValue({self._value!r})"
        return f"DynamicValue({self._value!r}, key={self._key!r})"
