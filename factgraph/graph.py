"""
The Graph collection.

A Graph wraps one named set of facts in a store and keeps a cumulative
count of every fact submitted through `add`.
"""

import logging
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from .core import DEFAULT_BUILDER, DEFAULT_STORE, FactStore, LiteralBuilder, StoredGraph
from .core import Node, PARENT_OF, Predicate, Triple, random_name
from .errors import FactgraphError, StoreError
from .query import visit_depth_first
from .serialize import flush_string, marshal, unmarshal

logger = logging.getLogger(__name__)


class Graph:
    """
    A named, mutable set of facts plus a cumulative add counter.

    Attributes:
        name: Unique name within the store
        store: The store holding this graph's facts
        backend: The store-level handle for this graph
    """

    def __init__(self, backend: StoredGraph, store: FactStore):
        self.backend = backend
        self.store = store
        self._triples_count = 0

    @property
    def name(self) -> str:
        return self.backend.name

    @property
    def triples_count(self) -> int:
        """
        Total facts ever submitted via add.

        Not the live size: duplicates are counted, removals are not, and
        bulk construction counts its input twice.
        """
        return self._triples_count

    # Construction

    @classmethod
    def new(cls, name: Optional[str] = None, store: Optional[FactStore] = None) -> "Graph":
        """Create an empty graph, randomly named if no name is given."""
        store = store if store is not None else DEFAULT_STORE
        backend = store.new_graph(name if name is not None else random_name())
        return cls(backend, store)

    @classmethod
    def from_triples(
        cls,
        triples: list[Triple],
        name: Optional[str] = None,
        store: Optional[FactStore] = None,
    ) -> "Graph":
        """
        Create a graph holding the given triples.

        The counter is pre-set to len(triples) before the add, so it ends at
        twice the input length.
        """
        g = cls.new(name, store)
        g._triples_count = len(triples)
        g.add(*triples)
        return g

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        name: Optional[str] = None,
        store: Optional[FactStore] = None,
        builder: LiteralBuilder = DEFAULT_BUILDER,
    ) -> "Graph":
        """
        Load a graph from a file of serialized facts.

        Raises:
            OSError: If the file cannot be read
            FactParseError: If a line is not a valid fact
        """
        data = Path(path).read_bytes()
        g = cls.new(name, store)
        g.unmarshal(data, builder)
        logger.debug("Loaded graph %s from %s (%d facts)", g.name, path, g.triples_count)
        return g

    @classmethod
    def open(cls, name: str, store: Optional[FactStore] = None) -> "Graph":
        """Attach to an existing graph in the store. The counter starts at zero."""
        store = store if store is not None else DEFAULT_STORE
        return cls(store.graph(name), store)

    # Mutation and access

    def add(self, *triples: Triple) -> None:
        """Add triples, counting each one whether or not it was already present."""
        self._triples_count += len(triples)
        self.backend.add_facts(triples)

    def exists(self, triple: Triple) -> bool:
        return self.backend.exists(triple)

    def all_triples(self) -> list[Triple]:
        """
        Materialize every fact in the graph.

        Returns the complete list or raises a single StoreError.
        """
        try:
            return list(self.backend.scan())
        except FactgraphError:
            raise
        except Exception as e:
            raise StoreError(f"scan of graph '{self.name}' failed: {e}") from e

    def __len__(self) -> int:
        return len(self.all_triples())

    def __iter__(self) -> Iterator[Triple]:
        return iter(self.all_triples())

    def __contains__(self, triple: Triple) -> bool:
        return self.exists(triple)

    def __repr__(self) -> str:
        return f"Graph(name={self.name!r}, triples_count={self._triples_count})"

    # Serialization

    def marshal(self) -> bytes:
        return marshal(self)

    def unmarshal(self, data: Union[bytes, str], builder: LiteralBuilder = DEFAULT_BUILDER) -> None:
        unmarshal(self, data, builder)

    def flush_string(self) -> str:
        return flush_string(self)

    # Traversal

    def visit_depth_first(
        self,
        root: Node,
        visit: Callable[[Node, int], None],
        start_depth: int = 0,
        *,
        relation: Predicate = PARENT_OF,
        max_depth: Optional[int] = None,
    ) -> None:
        visit_depth_first(
            self, root, visit, start_depth, relation=relation, max_depth=max_depth
        )

    # Algebra

    def subtract(self, other: "Graph") -> "Graph":
        from .algebra import subtract
        return subtract(self, other)

    def intersect(self, other: "Graph") -> "Graph":
        from .algebra import intersect
        return intersect(self, other)
