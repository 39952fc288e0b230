"""factgraph core - fact model, parsing, ordering and storage."""

from .models import (
    Literal,
    LiteralType,
    Node,
    PARENT_OF,
    Predicate,
    Triple,
)
from .ordering import random_name, sort_nodes, sort_triples
from .parser import (
    DEFAULT_BUILDER,
    LiteralBuilder,
    parse_literal,
    parse_node,
    parse_object,
    parse_predicate,
    parse_triple,
)
from .storage import (
    DEFAULT_STORE,
    FactStore,
    MemoryStore,
    SQLiteStore,
    StoredGraph,
)

__all__ = [
    "Literal",
    "LiteralType",
    "Node",
    "PARENT_OF",
    "Predicate",
    "Triple",
    "random_name",
    "sort_nodes",
    "sort_triples",
    "DEFAULT_BUILDER",
    "LiteralBuilder",
    "parse_literal",
    "parse_node",
    "parse_object",
    "parse_predicate",
    "parse_triple",
    "DEFAULT_STORE",
    "FactStore",
    "MemoryStore",
    "SQLiteStore",
    "StoredGraph",
]
