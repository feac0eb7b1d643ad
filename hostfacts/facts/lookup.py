"""Hierarchical lookup into nested fact values."""

import re
from collections.abc import Sequence

from hostfacts.facts.value import DynamicValue, make_key
from hostfacts.observability.logging import get_logger
from hostfacts.runtime.api import (
    ValueKind,
    array_len,
    ary_entry,
    classify,
    hash_lookup,
    to_symbol,
)

logger = get_logger(__name__)

_INDEX_PATTERN = re.compile(r"[+-]?[0-9]+")


def lookup(root: DynamicValue, path: Sequence[str]) -> DynamicValue | None:
    """Navigate `path` inside `root`'s value.

    Sequences are indexed by the segment parsed as a non-negative integer;
    mappings are looked up by the segment as a string and then as a Symbol.
    A successful result is cached on the root, so repeating the lookup
    returns the same handle without walking the value again.

    Returns:
        The child handle, or None when the path does not resolve
    """
    if not root.is_root:
        return lookup(root.root, (*root.segments, *path))

    segments = list(path)
    if not segments:
        return root

    key = make_key(segments)
    cached = root.child(key)
    if cached is not None:
        return cached

    value = root.value
    for segment in segments:
        kind = classify(value)
        if kind is ValueKind.SEQUENCE:
            if not _INDEX_PATTERN.fullmatch(segment):
                logger.debug(
                    "array_lookup_not_integral",
                    segment=segment,
                    detail="expected an integral value",
                )
                return None
            index = int(segment)
            if index < 0:
                logger.debug(
                    "array_lookup_negative_index",
                    segment=segment,
                    detail="expected a non-negative value",
                )
                return None
            length = array_len(value)
            if length == 0:
                logger.debug("array_lookup_empty_array", segment=segment)
                return None
            if index >= length:
                logger.debug(
                    "array_lookup_out_of_range",
                    segment=segment,
                    max_index=length - 1,
                )
                return None
            value = ary_entry(value, index)
        elif kind is ValueKind.MAPPING:
            result = hash_lookup(value, segment)
            if result is None:
                result = hash_lookup(value, to_symbol(segment))
            value = result
        else:
            # Scalars are not descended into; the walk keeps the current value
            logger.debug(
                "lookup_not_a_container",
                segment=segment,
                detail="container is not an array or hash",
            )

        if value is None:
            return None

    return root.wrap_child(value, key, segments)
