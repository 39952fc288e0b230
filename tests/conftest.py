"""Shared fixtures and fact builders."""

import pytest

from factgraph.core import (
    Literal,
    LiteralType,
    MemoryStore,
    Node,
    PARENT_OF,
    Predicate,
    Triple,
)


def node(name: str, type: str = "/n") -> Node:
    return Node(type, name)


def parent(a: str, b: str) -> Triple:
    """a parent_of b"""
    return Triple(node(a), PARENT_OF, node(b))


def fact(s: str, p: str, o: str) -> Triple:
    return Triple(node(s), Predicate(p), node(o))


def text_fact(s: str, p: str, value: str) -> Triple:
    return Triple(node(s), Predicate(p), Literal(LiteralType.TEXT, value))


@pytest.fixture
def store():
    """A fresh in-memory store per test."""
    s = MemoryStore()
    s.initialize()
    yield s
    s.close()
