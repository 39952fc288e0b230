"""Exception types raised by factgraph."""

from typing import Optional


class FactgraphError(Exception):
    """Base class for every error raised by factgraph."""


class StoreError(FactgraphError):
    """The backing fact store failed."""


class GraphExistsError(StoreError):
    """A graph with this name already exists in the store."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"graph '{name}' already exists")


class GraphNotFoundError(StoreError):
    """No graph with this name exists in the store."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"graph '{name}' not found")


class FactParseError(FactgraphError, ValueError):
    """Text could not be parsed into a fact."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class FactTypeError(FactgraphError, TypeError):
    """A fact term is not of the expected kind (e.g. a literal where a node was needed)."""


class TraversalCycleError(FactgraphError):
    """A depth-first walk came back to a node on its own ancestor path."""

    def __init__(self, path: list):
        self.path = path
        rendered = " -> ".join(str(n) for n in path)
        super().__init__(f"cycle detected: {rendered}")
