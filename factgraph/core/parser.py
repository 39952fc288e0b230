"""
Text parsing for facts.

One fact per line, three whitespace-separated terms:

    /person<alice>	"parent_of"@[]	/person<bob>
    /person<alice>	"age"@[]	"42"^^type:int64
    /person<alice>	"met"@[2016-01-01T00:00:00+00:00]	/person<carol>
"""

import re
from typing import Optional

from dateutil import parser as dateutil_parser

from ..errors import FactParseError
from .models import Literal, LiteralType, Node, Predicate, Term, Triple


_NODE_RE = re.compile(r"^(/[^<>\s]*)<([^>]*)>$")
_PREDICATE_RE = re.compile(r'^"([^"]*)"@\[([^\]]*)\]$')
_LITERAL_RE = re.compile(r'^"(.*)"\^\^type:(\w+)$', re.DOTALL)
_TRIPLE_RE = re.compile(
    r'^\s*(?P<subject>/[^<>\s]*<[^>]*>)'
    r'\s+(?P<predicate>"[^"]*"@\[[^\]]*\])'
    r'\s+(?P<object>\S.*?)\s*$'
)

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1

_TRUE = {"1", "t", "T", "true", "TRUE", "True"}
_FALSE = {"0", "f", "F", "false", "FALSE", "False"}


class LiteralBuilder:
    """
    Builds typed literals from their raw text.

    Args:
        max_text_size: Reject text and blob values longer than this (None = unbounded)
    """

    def __init__(self, max_text_size: Optional[int] = None):
        self.max_text_size = max_text_size

    def build(self, type_name: str, raw: str) -> Literal:
        try:
            lit_type = LiteralType(type_name)
        except ValueError:
            raise FactParseError(f"unknown literal type: {type_name}") from None

        try:
            if lit_type is LiteralType.BOOL:
                return Literal(lit_type, self._parse_bool(raw))
            if lit_type is LiteralType.INT64:
                value = int(raw)
                if not _INT64_MIN <= value <= _INT64_MAX:
                    raise FactParseError(f"int64 out of range: {raw}")
                return Literal(lit_type, value)
            if lit_type is LiteralType.FLOAT64:
                return Literal(lit_type, float(raw))
            if lit_type is LiteralType.TEXT:
                self._check_size(len(raw))
                return Literal(lit_type, raw)
            blob = self._parse_blob(raw)
            self._check_size(len(blob))
            return Literal(lit_type, blob)
        except FactParseError:
            raise
        except ValueError as e:
            raise FactParseError(f"invalid {type_name} literal {raw!r}: {e}") from e

    def _check_size(self, size: int) -> None:
        if self.max_text_size is not None and size > self.max_text_size:
            raise FactParseError(
                f"literal of size {size} exceeds maximum of {self.max_text_size}"
            )

    @staticmethod
    def _parse_bool(raw: str) -> bool:
        if raw in _TRUE:
            return True
        if raw in _FALSE:
            return False
        raise FactParseError(f"invalid bool literal: {raw!r}")

    @staticmethod
    def _parse_blob(raw: str) -> bytes:
        if not (raw.startswith("[") and raw.endswith("]")):
            raise FactParseError(f"invalid blob literal: {raw!r}")
        inner = raw[1:-1].split()
        return bytes(int(b) for b in inner)


DEFAULT_BUILDER = LiteralBuilder()


def parse_node(text: str) -> Node:
    """Parse `/type<id>` into a Node."""
    m = _NODE_RE.match(text.strip())
    if not m:
        raise FactParseError(f"invalid node: {text!r}")
    return Node(type=m.group(1), id=m.group(2))


def parse_predicate(text: str) -> Predicate:
    """Parse `"id"@[]` or `"id"@[<timestamp>]` into a Predicate."""
    m = _PREDICATE_RE.match(text.strip())
    if not m:
        raise FactParseError(f"invalid predicate: {text!r}")

    pred_id, anchor_text = m.group(1), m.group(2).strip()
    if not anchor_text:
        return Predicate(pred_id)

    try:
        anchor = dateutil_parser.isoparse(anchor_text)
    except ValueError as e:
        raise FactParseError(f"invalid predicate anchor {anchor_text!r}: {e}") from e
    if anchor.tzinfo is None:
        raise FactParseError(f"predicate anchor has no timezone: {anchor_text!r}")
    return Predicate(pred_id, anchor)


def parse_literal(text: str, builder: LiteralBuilder = DEFAULT_BUILDER) -> Literal:
    """Parse `"value"^^type:<type>` into a Literal."""
    m = _LITERAL_RE.match(text.strip())
    if not m:
        raise FactParseError(f"invalid literal: {text!r}")
    return builder.build(m.group(2), m.group(1))


def parse_object(text: str, builder: LiteralBuilder = DEFAULT_BUILDER) -> Term:
    """Parse a triple object, which may be a node, a predicate or a literal."""
    text = text.strip()
    if text.startswith("/"):
        return parse_node(text)
    if _PREDICATE_RE.match(text):
        return parse_predicate(text)
    return parse_literal(text, builder)


def parse_triple(text: str, builder: LiteralBuilder = DEFAULT_BUILDER) -> Triple:
    """
    Parse one line of text into a Triple.

    Raises:
        FactParseError: If the line is not a well-formed fact
    """
    m = _TRIPLE_RE.match(text)
    if not m:
        raise FactParseError(f"invalid triple: {text!r}")
    return Triple(
        subject=parse_node(m.group("subject")),
        predicate=parse_predicate(m.group("predicate")),
        object=parse_object(m.group("object"), builder),
    )
