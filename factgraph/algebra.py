"""
Set algebra between graphs.

Both operations leave their inputs untouched and return a new, randomly
named graph in the first operand's store.
"""

import logging
from dataclasses import dataclass, field

from .core import Triple
from .errors import FactgraphError
from .graph import Graph

logger = logging.getLogger(__name__)


@dataclass
class SkippedFact:
    """A fact left out of an intersection because its existence check failed."""

    triple: Triple
    error: Exception


@dataclass
class IntersectionResult:
    """Outcome of an intersection, including facts that could not be checked."""

    graph: Graph
    skipped: list[SkippedFact] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.skipped


def copy(graph: Graph) -> Graph:
    """Copy every fact into a fresh graph in the same store."""
    return Graph.from_triples(graph.all_triples(), store=graph.store)


def subtract(a: Graph, b: Graph) -> Graph:
    """
    Facts of `a` that are not in `b`.

    `a` is copied in full, then every fact of `b` is removed from the copy;
    facts of `b` missing from the copy are ignored.
    """
    result = copy(a)
    others = b.all_triples()
    result.backend.remove_facts(others)
    logger.debug("Subtracted %s from %s into %s", b.name, a.name, result.name)
    return result


def intersect_report(a: Graph, b: Graph) -> IntersectionResult:
    """
    Facts present in both `a` and `b`, with any facts whose check against
    `b` raised reported in `skipped` instead of the result graph.
    """
    result = IntersectionResult(graph=Graph.new(store=a.store))

    for triple in a.all_triples():
        try:
            found = b.exists(triple)
        except FactgraphError as e:
            result.skipped.append(SkippedFact(triple, e))
            continue
        if found:
            result.graph.add(triple)

    logger.debug(
        "Intersected %s with %s into %s (%d skipped)",
        a.name, b.name, result.graph.name, len(result.skipped),
    )
    return result


def intersect(a: Graph, b: Graph) -> Graph:
    """
    Facts present in both `a` and `b`.

    Facts whose existence check fails are left out; use intersect_report
    to see which.
    """
    result = intersect_report(a, b)
    for skipped in result.skipped:
        logger.warning("Skipped %s in intersection: %s", skipped.triple, skipped.error)
    return result.graph
