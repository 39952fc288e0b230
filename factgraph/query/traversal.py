"""
Depth-first traversal over parent_of hierarchies.

The graph is read as a tree: each `subject parent_of object` fact makes
the object a child of the subject.
"""

from typing import TYPE_CHECKING, Callable, Optional

from ..core import Node, PARENT_OF, Predicate, sort_nodes
from ..errors import TraversalCycleError

if TYPE_CHECKING:
    from ..graph import Graph


Visitor = Callable[[Node, int], None]


class DepthFirstTraverser:
    """
    Pre-order walk of a graph along a single relation.

    Children are visited in ascending order of their identifier string, so
    two walks from the same root over the same data always agree.
    """

    def __init__(self, graph: "Graph", relation: Predicate = PARENT_OF):
        self.graph = graph
        self.relation = relation

    def children(self, node: Node) -> list[Node]:
        """
        Direct children of a node, sorted.

        Raises:
            FactTypeError: If a relation fact points at a literal or predicate
        """
        facts = self.graph.backend.facts_for(node, self.relation)
        return sort_nodes(t.object_node() for t in facts)

    def walk(
        self,
        root: Node,
        visit: Visitor,
        start_depth: int = 0,
        max_depth: Optional[int] = None,
    ) -> None:
        """
        Visit root, then each subtree in sorted child order.

        Args:
            root: Node to start from
            visit: Called as visit(node, depth) for every node reached
            start_depth: Depth reported for the root
            max_depth: Do not descend below this depth (None = unbounded)

        Raises:
            FactTypeError: If a child is not a node; the walk stops there
            TraversalCycleError: If a node is its own ancestor
        """
        # Stack entries: (node, depth, ancestor path including node)
        stack: list[tuple[Node, int, tuple[Node, ...]]] = [(root, start_depth, (root,))]

        while stack:
            node, depth, path = stack.pop()
            visit(node, depth)

            if max_depth is not None and depth >= max_depth:
                continue

            children = self.children(node)
            on_path = set(path)
            for child in children:
                if child in on_path:
                    raise TraversalCycleError(list(path) + [child])

            # Reversed so the smallest child is popped first
            for child in reversed(children):
                stack.append((child, depth + 1, path + (child,)))


def visit_depth_first(
    graph: "Graph",
    root: Node,
    visit: Visitor,
    start_depth: int = 0,
    *,
    relation: Predicate = PARENT_OF,
    max_depth: Optional[int] = None,
) -> None:
    """Depth-first, sorted-sibling, pre-order walk from root."""
    DepthFirstTraverser(graph, relation).walk(root, visit, start_depth, max_depth)
