"""
factgraph - Graph algebra over a triple store.

Named fact collections, parent_of traversal, subtraction/intersection
and canonical serialization.
"""

from .core import (
    DEFAULT_STORE,
    FactStore,
    Literal,
    LiteralType,
    MemoryStore,
    Node,
    PARENT_OF,
    Predicate,
    SQLiteStore,
    Triple,
    parse_triple,
)
from .errors import (
    FactgraphError,
    FactParseError,
    FactTypeError,
    GraphExistsError,
    GraphNotFoundError,
    StoreError,
    TraversalCycleError,
)
from .graph import Graph
from .algebra import IntersectionResult, intersect, intersect_report, subtract
from .query import DepthFirstTraverser, visit_depth_first
from .serialize import flush_string, marshal, unmarshal

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_STORE",
    "FactStore",
    "Literal",
    "LiteralType",
    "MemoryStore",
    "Node",
    "PARENT_OF",
    "Predicate",
    "SQLiteStore",
    "Triple",
    "parse_triple",
    "FactgraphError",
    "FactParseError",
    "FactTypeError",
    "GraphExistsError",
    "GraphNotFoundError",
    "StoreError",
    "TraversalCycleError",
    "Graph",
    "IntersectionResult",
    "intersect",
    "intersect_report",
    "subtract",
    "DepthFirstTraverser",
    "visit_depth_first",
    "flush_string",
    "marshal",
    "unmarshal",
    "__version__",
]
