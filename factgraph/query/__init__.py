"""factgraph query - hierarchical traversal."""

from .traversal import DepthFirstTraverser, visit_depth_first

__all__ = ["DepthFirstTraverser", "visit_depth_first"]
