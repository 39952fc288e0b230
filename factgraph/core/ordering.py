"""Deterministic ordering and naming helpers."""

import random
import time
from typing import Iterable

from .models import Node, Triple


# Seeded once from wall-clock time; graph names only need to be unlikely to collide.
_rand = random.Random(time.time_ns())


def random_name() -> str:
    """Return a pseudo-random decimal graph name below 10**16."""
    return str(_rand.randrange(10 ** 16))


def sort_nodes(nodes: Iterable[Node]) -> list[Node]:
    """Sort nodes ascending by identifier string (case-sensitive, stable)."""
    return sorted(nodes, key=lambda n: n.id)


def sort_triples(triples: Iterable[Triple]) -> list[Triple]:
    """Sort triples ascending by their canonical string form."""
    return sorted(triples, key=str)
