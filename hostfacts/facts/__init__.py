"""Fact storage and hierarchical lookup."""

from hostfacts.facts.collection import FactCollection
from hostfacts.facts.lookup import lookup
from hostfacts.facts.value import DynamicValue, make_key, parse_query

__all__ = ["DynamicValue", "FactCollection", "lookup", "make_key", "parse_query"]
