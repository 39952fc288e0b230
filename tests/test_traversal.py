"""Tests for depth-first parent_of traversal."""

import pytest

from factgraph import Graph
from factgraph.core import Literal, LiteralType, PARENT_OF, Predicate, Triple
from factgraph.errors import FactTypeError, TraversalCycleError
from factgraph.query import DepthFirstTraverser, visit_depth_first

from conftest import fact, node, parent, text_fact


def collect(graph, root, **kwargs):
    """Run a walk and return [(node id, depth), ...]."""
    visits = []
    graph.visit_depth_first(root, lambda n, d: visits.append((n.id, d)), **kwargs)
    return visits


@pytest.fixture
def family(store):
    """
    a
    ├── b
    └── c
        └── d
    """
    return Graph.from_triples(
        [parent("a", "b"), parent("a", "c"), parent("c", "d")],
        store=store,
    )


class TestVisitOrder:
    """Tests for pre-order, sorted-sibling visiting."""

    def test_example_tree(self, family):
        assert collect(family, node("a")) == [("a", 0), ("b", 1), ("c", 1), ("d", 2)]

    def test_start_depth(self, family):
        visits = []
        family.visit_depth_first(node("a"), lambda n, d: visits.append((n.id, d)), 5)
        assert visits == [("a", 5), ("b", 6), ("c", 6), ("d", 7)]

    def test_siblings_sorted_regardless_of_insert_order(self, store):
        g = Graph.from_triples(
            [parent("r", "zeta"), parent("r", "Beta"), parent("r", "alpha"), parent("r", "beta")],
            store=store,
        )
        assert [n for n, _ in collect(g, node("r"))] == ["r", "Beta", "alpha", "beta", "zeta"]

    def test_deterministic(self, store):
        g = Graph.from_triples(
            [parent("r", str(i)) for i in range(20)] + [parent("7", "x"), parent("7", "w")],
            store=store,
        )
        assert collect(g, node("r")) == collect(g, node("r"))

    def test_subtree_finished_before_next_sibling(self, store):
        g = Graph.from_triples(
            [parent("a", "b"), parent("a", "c"), parent("b", "b2"), parent("b2", "b3")],
            store=store,
        )
        assert collect(g, node("a")) == [("a", 0), ("b", 1), ("b2", 2), ("b3", 3), ("c", 1)]

    def test_leaf_root(self, family):
        assert collect(family, node("d")) == [("d", 0)]

    def test_unknown_root_still_visited(self, family):
        assert collect(family, node("nobody")) == [("nobody", 0)]

    def test_other_relations_ignored(self, store):
        g = Graph.from_triples(
            [parent("a", "b"), fact("a", "knows", "c"), text_fact("a", "name", "Alice")],
            store=store,
        )
        assert collect(g, node("a")) == [("a", 0), ("b", 1)]

    def test_parsed_parent_of_is_followed(self, store):
        g = Graph.new(store=store)
        g.unmarshal('/n<a>\t"parent_of"@[]\t/n<b>')
        assert collect(g, node("a")) == [("a", 0), ("b", 1)]

    def test_diamond_visits_shared_child_per_path(self, store):
        g = Graph.from_triples(
            [parent("a", "b"), parent("a", "c"), parent("b", "d"), parent("c", "d")],
            store=store,
        )
        assert collect(g, node("a")) == [("a", 0), ("b", 1), ("d", 2), ("c", 1), ("d", 2)]

    def test_deep_chain(self, store):
        depth = 5000
        g = Graph.from_triples(
            [parent(f"n{i}", f"n{i + 1}") for i in range(depth)],
            store=store,
        )
        visits = collect(g, node("n0"))
        assert len(visits) == depth + 1
        assert visits[-1] == (f"n{depth}", depth)


class TestOptions:
    """Tests for relation and depth options."""

    def test_max_depth(self, family):
        assert collect(family, node("a"), max_depth=1) == [("a", 0), ("b", 1), ("c", 1)]
        assert collect(family, node("a"), max_depth=0) == [("a", 0)]

    def test_custom_relation(self, store):
        manages = Predicate("manages")
        g = Graph.from_triples(
            [Triple(node("boss"), manages, node("x")), parent("boss", "kid")],
            store=store,
        )
        assert collect(g, node("boss"), relation=manages) == [("boss", 0), ("x", 1)]

    def test_traverser_children(self, family):
        traverser = DepthFirstTraverser(family)
        assert [n.id for n in traverser.children(node("a"))] == ["b", "c"]
        assert traverser.children(node("d")) == []

    def test_module_function(self, family):
        visits = []
        visit_depth_first(family, node("c"), lambda n, d: visits.append((n.id, d)))
        assert visits == [("c", 0), ("d", 1)]


class TestErrors:
    """Tests for failure modes."""

    def test_literal_child_is_type_error(self, store):
        g = Graph.from_triples(
            [Triple(node("a"), PARENT_OF, Literal(LiteralType.INT64, 1))],
            store=store,
        )
        visits = []
        with pytest.raises(FactTypeError):
            g.visit_depth_first(node("a"), lambda n, d: visits.append(n.id))
        # The root was visited before its children were inspected
        assert visits == ["a"]

    def test_type_error_aborts_remaining_walk(self, store):
        g = Graph.from_triples(
            [
                parent("a", "b"),
                parent("a", "c"),
                Triple(node("b"), PARENT_OF, Literal(LiteralType.TEXT, "oops")),
                parent("c", "d"),
            ],
            store=store,
        )
        visits = []
        with pytest.raises(FactTypeError):
            g.visit_depth_first(node("a"), lambda n, d: visits.append(n.id))
        assert visits == ["a", "b"]

    def test_cycle_detected(self, store):
        g = Graph.from_triples(
            [parent("a", "b"), parent("b", "c"), parent("c", "a")],
            store=store,
        )
        visits = []
        with pytest.raises(TraversalCycleError) as exc:
            g.visit_depth_first(node("a"), lambda n, d: visits.append(n.id))
        assert [n.id for n in exc.value.path] == ["a", "b", "c", "a"]
        assert visits == ["a", "b", "c"]

    def test_self_loop(self, store):
        g = Graph.from_triples([parent("a", "a")], store=store)
        with pytest.raises(TraversalCycleError):
            g.visit_depth_first(node("a"), lambda n, d: None)

    def test_visitor_error_propagates(self, family):
        def boom(n, d):
            if n.id == "c":
                raise RuntimeError("stop")

        with pytest.raises(RuntimeError, match="stop"):
            family.visit_depth_first(node("a"), boom)
