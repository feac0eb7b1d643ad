"""Tests for FactCollection."""

from typing import ClassVar

from hostfacts.facts.collection import FactCollection
from hostfacts.facts.value import DynamicValue
from hostfacts.resolvers.base import BaseResolver


class CountingResolver(BaseResolver):
    """Resolver group whose probe counts its runs."""

    fact_names: ClassVar[tuple[str, ...]] = ("disks", "partitions")
    runs: ClassVar[int] = 0

    @classmethod
    def _collect(cls) -> None:
        cls.runs += 1
        cls._fact_list["disks"] = {"sda": {"size_bytes": 512}}
        cls._fact_list["partitions"] = {"sda1": {"mount": "/"}}


def _collection() -> FactCollection:
    CountingResolver.invalidate_cache()
    CountingResolver.runs = 0
    facts = FactCollection()
    facts.register(CountingResolver, CountingResolver.fact_names)
    return facts


class TestAddAndGet:
    """Direct fact storage."""

    def test_add_wraps_plain_values(self) -> None:
        facts = FactCollection()
        facts.add("role", "web")

        fact = facts.get("role")

        assert isinstance(fact, DynamicValue)
        assert fact.is_root
        assert facts.value("role") == "web"
        assert "role" in facts
        assert len(facts) == 1

    def test_add_none_removes(self) -> None:
        facts = FactCollection()
        facts.add("role", "web")
        facts.add("role", None)
        assert "role" not in facts

    def test_unknown_fact_is_none(self) -> None:
        assert FactCollection().get("missing") is None


class TestResolverGroups:
    """Lazy resolution through registered groups."""

    def test_group_probe_runs_once(self) -> None:
        """Two facts of the same group share one probe run."""
        facts = _collection()

        assert facts.value("disks") == {"sda": {"size_bytes": 512}}
        assert facts.value("partitions") == {"sda1": {"mount": "/"}}
        assert CountingResolver.runs == 1

    def test_clear_reruns_probe(self) -> None:
        """After an explicit reset the probe runs again."""
        facts = _collection()
        facts.value("disks")

        facts.clear()
        facts.value("partitions")

        assert CountingResolver.runs == 2

    def test_to_dict_resolves_everything(self) -> None:
        facts = _collection()
        facts.add("role", "web")

        assert facts.to_dict() == {
            "disks": {"sda": {"size_bytes": 512}},
            "partitions": {"sda1": {"mount": "/"}},
            "role": "web",
        }
        assert facts.names() == ["disks", "partitions", "role"]


class TestQuery:
    """Dotted queries."""

    def test_query_navigates_into_fact(self) -> None:
        facts = _collection()

        result = facts.query("disks.sda.size_bytes")

        assert result is not None
        assert result.value == 512

    def test_query_fact_name_only(self) -> None:
        facts = FactCollection()
        facts.add("role", "web")
        result = facts.query("role")
        assert result is not None
        assert result.value == "web"

    def test_query_quoted_segment(self) -> None:
        facts = FactCollection()
        facts.add("sysctl", {"net.ipv4.ip_forward": "1"})

        result = facts.query('sysctl."net.ipv4.ip_forward"')

        assert result is not None
        assert result.value == "1"

    def test_query_unknown_fact(self) -> None:
        assert FactCollection().query("nope.0") is None

    def test_repeated_query_is_cached(self) -> None:
        facts = FactCollection()
        facts.add("interfaces", ["eth0", "lo"])
        assert facts.query("interfaces.1") is facts.query("interfaces.1")
