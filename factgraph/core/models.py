"""
Core fact model for factgraph.

Nodes, predicates and literals combine into immutable triples. Every term
has a canonical string form; triples are ordered and serialized by it.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from ..errors import FactParseError, FactTypeError


class LiteralType(Enum):
    """Value types a literal can carry."""

    BOOL = "bool"
    INT64 = "int64"
    FLOAT64 = "float64"
    TEXT = "text"
    BLOB = "blob"


@dataclass(frozen=True)
class Node:
    """
    An entity identifier.

    Attributes:
        type: Hierarchical type, always starting with "/" (e.g. "/person")
        id: Identifier within the type; the sort key among siblings
    """

    type: str
    id: str

    def __str__(self) -> str:
        return f"{self.type}<{self.id}>"


@dataclass(frozen=True)
class Predicate:
    """
    A relation identifier.

    An immutable predicate has no anchor; a temporal one is anchored to a
    timezone-aware point in time.
    """

    id: str
    anchor: Optional[datetime] = None

    @property
    def temporal(self) -> bool:
        return self.anchor is not None

    def __str__(self) -> str:
        anchor = self.anchor.isoformat() if self.anchor else ""
        return f'"{self.id}"@[{anchor}]'


@dataclass(frozen=True)
class Literal:
    """
    A typed value usable as a triple object.

    Text values are written verbatim into the canonical form, so they may
    not contain a line break: the serialized form is one fact per line.
    """

    type: LiteralType
    value: Union[bool, int, float, str, bytes]

    def __post_init__(self):
        if self.type is LiteralType.TEXT and ("\n" in self.value or "\r" in self.value):
            raise FactParseError("text literal cannot contain a line break")

    def __str__(self) -> str:
        if self.type is LiteralType.BOOL:
            rendered = "true" if self.value else "false"
        elif self.type is LiteralType.BLOB:
            rendered = "[" + " ".join(str(b) for b in self.value) + "]"
        else:
            rendered = str(self.value)
        return f'"{rendered}"^^type:{self.type.value}'


Term = Union[Node, Predicate, Literal]


@dataclass(frozen=True, eq=False)
class Triple:
    """
    A single fact: subject, predicate, object.

    Triples are identified by their canonical string, the three terms
    joined by tabs: they compare, hash and sort by it. Two anchors at the
    same instant with different offsets are different facts, and so are
    0.0 and -0.0.
    """

    subject: Node
    predicate: Predicate
    object: Term

    def object_node(self) -> Node:
        """Return the object as a Node, or raise FactTypeError."""
        if not isinstance(self.object, Node):
            raise FactTypeError(f"object of {self} is not a node")
        return self.object

    def __str__(self) -> str:
        return f"{self.subject}\t{self.predicate}\t{self.object}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Triple):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __lt__(self, other: "Triple") -> bool:
        if not isinstance(other, Triple):
            return NotImplemented
        return str(self) < str(other)


# The one relation the depth-first traverser follows. Shared by every graph.
PARENT_OF = Predicate("parent_of")
