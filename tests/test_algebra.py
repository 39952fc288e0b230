"""Tests for graph subtraction and intersection."""

import logging

import pytest

from factgraph import Graph
from factgraph.algebra import IntersectionResult, copy, intersect, intersect_report, subtract
from factgraph.errors import StoreError

from conftest import fact, parent, text_fact


A_FACTS = [parent("a", "b"), parent("a", "c"), fact("a", "knows", "d"), text_fact("a", "name", "Alice")]
B_FACTS = [parent("a", "c"), text_fact("a", "name", "Alice"), parent("x", "y")]


@pytest.fixture
def a(store):
    return Graph.from_triples(A_FACTS, name="a", store=store)


@pytest.fixture
def b(store):
    return Graph.from_triples(B_FACTS, name="b", store=store)


class TestCopy:
    """Tests for the full-copy step behind subtraction."""

    def test_copy_contents_and_count(self, a):
        c = copy(a)
        assert c.name != a.name
        assert set(c.all_triples()) == set(A_FACTS)
        assert c.triples_count == 2 * len(A_FACTS)


class TestSubtract:
    """Tests for set difference."""

    def test_difference(self, a, b):
        result = subtract(a, b)
        assert set(result.all_triples()) == set(A_FACTS) - set(B_FACTS)

    def test_method_form(self, a, b):
        assert set(a.subtract(b).all_triples()) == {parent("a", "b"), fact("a", "knows", "d")}

    def test_inputs_untouched(self, a, b):
        subtract(a, b)
        assert set(a.all_triples()) == set(A_FACTS)
        assert set(b.all_triples()) == set(B_FACTS)
        assert a.triples_count == 2 * len(A_FACTS)

    def test_counter_is_copy_count(self, a, b):
        # Removals never lower the counter
        assert subtract(a, b).triples_count == 2 * len(A_FACTS)

    def test_subtract_empty_is_identity(self, a, store):
        result = subtract(a, Graph.new(store=store))
        assert set(result.all_triples()) == set(A_FACTS)

    def test_subtract_self_is_empty(self, a):
        assert subtract(a, a).all_triples() == []

    def test_new_graph_in_same_store(self, a, b, store):
        result = subtract(a, b)
        assert result.name not in {"a", "b"}
        assert result.store is store
        assert result.name in store.graph_names()

    def test_scan_failure_propagates(self, a, b, monkeypatch):
        def broken_scan():
            raise StoreError("gone")

        monkeypatch.setattr(b.backend, "scan", broken_scan)
        with pytest.raises(StoreError):
            subtract(a, b)


class TestIntersect:
    """Tests for set intersection."""

    def test_intersection(self, a, b):
        result = intersect(a, b)
        assert set(result.all_triples()) == set(A_FACTS) & set(B_FACTS)
        assert result.triples_count == len(set(A_FACTS) & set(B_FACTS))

    def test_method_form(self, a, b):
        assert set(a.intersect(b).all_triples()) == {parent("a", "c"), text_fact("a", "name", "Alice")}

    def test_intersect_self_is_identity(self, a):
        assert set(intersect(a, a).all_triples()) == set(A_FACTS)

    def test_intersect_empty(self, a, store):
        assert intersect(a, Graph.new(store=store)).all_triples() == []

    def test_inputs_untouched(self, a, b):
        intersect(a, b)
        assert set(a.all_triples()) == set(A_FACTS)
        assert set(b.all_triples()) == set(B_FACTS)

    def test_existence_errors_skipped(self, a, b, monkeypatch, caplog):
        real_exists = b.backend.exists

        def flaky_exists(triple):
            if triple == parent("a", "c"):
                raise StoreError("lookup failed")
            return real_exists(triple)

        monkeypatch.setattr(b.backend, "exists", flaky_exists)
        with caplog.at_level(logging.WARNING, logger="factgraph.algebra"):
            result = intersect(a, b)

        assert set(result.all_triples()) == {text_fact("a", "name", "Alice")}
        assert "lookup failed" in caplog.text


class TestIntersectReport:
    """Tests for the explicit intersection result."""

    def test_complete(self, a, b):
        report = intersect_report(a, b)
        assert isinstance(report, IntersectionResult)
        assert report.complete
        assert report.skipped == []
        assert set(report.graph.all_triples()) == set(A_FACTS) & set(B_FACTS)

    def test_reports_skipped(self, a, b, monkeypatch):
        def failing_exists(triple):
            raise StoreError("down")

        monkeypatch.setattr(b.backend, "exists", failing_exists)
        report = intersect_report(a, b)

        assert not report.complete
        assert report.graph.all_triples() == []
        assert {s.triple for s in report.skipped} == set(A_FACTS)
        assert all(isinstance(s.error, StoreError) for s in report.skipped)
