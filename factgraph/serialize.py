"""
Canonical text form of a graph.

One fact per line, sorted by the fact's canonical string, no trailing
newline. Reading skips blank lines.
"""

import logging
from typing import TYPE_CHECKING, Union

from .core import DEFAULT_BUILDER, LiteralBuilder, parse_triple, sort_triples
from .errors import FactgraphError, FactParseError

if TYPE_CHECKING:
    from .graph import Graph

logger = logging.getLogger(__name__)


def marshal(graph: "Graph") -> bytes:
    """Serialize every fact, sorted, newline-separated."""
    triples = sort_triples(graph.all_triples())
    return "\n".join(str(t) for t in triples).encode("utf-8")


def unmarshal(
    graph: "Graph",
    data: Union[bytes, str],
    builder: LiteralBuilder = DEFAULT_BUILDER,
) -> None:
    """
    Parse serialized facts and add them to the graph one at a time.

    Stops at the first bad line; facts from earlier lines stay added.

    Raises:
        FactParseError: With the 1-based line number of the bad line
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FactParseError(f"input is not valid UTF-8: {e}") from e

    for lineno, line in enumerate(data.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            triple = parse_triple(line, builder)
        except FactParseError as e:
            raise FactParseError(str(e), line=lineno) from e
        graph.add(triple)


def flush_string(graph: "Graph") -> str:
    """Like marshal, but returns an empty string instead of raising."""
    try:
        return marshal(graph).decode("utf-8")
    except FactgraphError as e:
        logger.warning("Could not marshal graph %s: %s", graph.name, e)
        return ""
