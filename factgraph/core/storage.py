"""
Fact store backends for factgraph.

A store holds named graphs; each graph is a set of triples supporting add,
remove, existence check and full scan. Graph-level semantics (ordering,
traversal, algebra) live above this layer.
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional

from ..errors import FactParseError, GraphExistsError, GraphNotFoundError, StoreError
from .models import Node, Predicate, Triple
from .parser import parse_triple

logger = logging.getLogger(__name__)


class StoredGraph(ABC):
    """One named set of triples inside a store."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The graph's unique name within its store."""
        pass

    @abstractmethod
    def add_facts(self, triples: Iterable[Triple]) -> None:
        """Insert triples. Already present triples are left as they are."""
        pass

    @abstractmethod
    def remove_facts(self, triples: Iterable[Triple]) -> None:
        """Delete triples. Absent triples are ignored."""
        pass

    @abstractmethod
    def exists(self, triple: Triple) -> bool:
        """Check whether a triple is present."""
        pass

    @abstractmethod
    def scan(self) -> Iterator[Triple]:
        """Iterate over every triple, in no particular order."""
        pass

    @abstractmethod
    def facts_for(self, subject: Node, predicate: Predicate) -> Iterator[Triple]:
        """Iterate over triples with the given subject and predicate."""
        pass


class FactStore(ABC):
    """Abstract registry of named graphs."""

    @abstractmethod
    def initialize(self) -> None:
        """Set up storage (create tables, etc.)."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Clean up resources."""
        pass

    @abstractmethod
    def new_graph(self, name: str) -> StoredGraph:
        """Create an empty graph. Raises GraphExistsError on a name collision."""
        pass

    @abstractmethod
    def graph(self, name: str) -> StoredGraph:
        """Open an existing graph. Raises GraphNotFoundError if missing."""
        pass

    @abstractmethod
    def delete_graph(self, name: str) -> None:
        """Drop a graph and all its facts."""
        pass

    @abstractmethod
    def graph_names(self) -> list[str]:
        """Names of all graphs, sorted."""
        pass


class _MemoryGraph(StoredGraph):

    def __init__(self, name: str, lock: threading.RLock):
        self._name = name
        self._lock = lock
        # Keyed by canonical string, as the SQLite store is
        self._facts: dict[str, Triple] = {}
        # (subject, predicate) canonical strings -> {fact key: triple}
        self._index: dict[tuple[str, str], dict[str, Triple]] = {}

    @property
    def name(self) -> str:
        return self._name

    def add_facts(self, triples: Iterable[Triple]) -> None:
        with self._lock:
            for t in triples:
                if not isinstance(t, Triple):
                    raise StoreError(f"not a triple: {t!r}")
                key = str(t)
                self._facts[key] = t
                self._index.setdefault((str(t.subject), str(t.predicate)), {})[key] = t

    def remove_facts(self, triples: Iterable[Triple]) -> None:
        with self._lock:
            for t in triples:
                key = str(t)
                self._facts.pop(key, None)
                index_key = (str(t.subject), str(t.predicate))
                bucket = self._index.get(index_key)
                if bucket is not None:
                    bucket.pop(key, None)
                    if not bucket:
                        del self._index[index_key]

    def exists(self, triple: Triple) -> bool:
        with self._lock:
            return str(triple) in self._facts

    def scan(self) -> Iterator[Triple]:
        with self._lock:
            snapshot = list(self._facts.values())
        return iter(snapshot)

    def facts_for(self, subject: Node, predicate: Predicate) -> Iterator[Triple]:
        with self._lock:
            snapshot = list(self._index.get((str(subject), str(predicate)), {}).values())
        return iter(snapshot)


class MemoryStore(FactStore):
    """In-process store - the default for library use and tests."""

    def __init__(self):
        self._lock = threading.RLock()
        self._graphs: dict[str, _MemoryGraph] = {}

    def initialize(self) -> None:
        pass

    def close(self) -> None:
        with self._lock:
            self._graphs.clear()

    def new_graph(self, name: str) -> StoredGraph:
        with self._lock:
            if name in self._graphs:
                raise GraphExistsError(name)
            g = _MemoryGraph(name, self._lock)
            self._graphs[name] = g
        logger.debug("Created in-memory graph %s", name)
        return g

    def graph(self, name: str) -> StoredGraph:
        with self._lock:
            try:
                return self._graphs[name]
            except KeyError:
                raise GraphNotFoundError(name) from None

    def delete_graph(self, name: str) -> None:
        with self._lock:
            if self._graphs.pop(name, None) is None:
                raise GraphNotFoundError(name)

    def graph_names(self) -> list[str]:
        with self._lock:
            return sorted(self._graphs)


class _SQLiteGraph(StoredGraph):

    def __init__(self, store: "SQLiteStore", name: str):
        self._store = store
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def add_facts(self, triples: Iterable[Triple]) -> None:
        rows = [self._row(t) for t in triples]
        self._store._write(
            "INSERT OR IGNORE INTO facts (graph, subject, predicate, fact) VALUES (?, ?, ?, ?)",
            rows,
        )

    def remove_facts(self, triples: Iterable[Triple]) -> None:
        rows = [(self._name, str(t)) for t in triples]
        self._store._write("DELETE FROM facts WHERE graph = ? AND fact = ?", rows)

    def exists(self, triple: Triple) -> bool:
        row = self._store._fetchone(
            "SELECT 1 FROM facts WHERE graph = ? AND fact = ?",
            (self._name, str(triple)),
        )
        return row is not None

    def scan(self) -> Iterator[Triple]:
        rows = self._store._fetchall(
            "SELECT fact FROM facts WHERE graph = ?", (self._name,)
        )
        return iter(self._parse_rows(rows))

    def facts_for(self, subject: Node, predicate: Predicate) -> Iterator[Triple]:
        rows = self._store._fetchall(
            "SELECT fact FROM facts WHERE graph = ? AND subject = ? AND predicate = ?",
            (self._name, str(subject), str(predicate)),
        )
        return iter(self._parse_rows(rows))

    def _row(self, t: Triple) -> tuple:
        if not isinstance(t, Triple):
            raise StoreError(f"not a triple: {t!r}")
        return (self._name, str(t.subject), str(t.predicate), str(t))

    def _parse_rows(self, rows) -> list[Triple]:
        try:
            return [parse_triple(row["fact"]) for row in rows]
        except FactParseError as e:
            raise StoreError(f"corrupt fact in graph '{self._name}': {e}") from e


class SQLiteStore(FactStore):
    """SQLite store - persists graphs in a single database file."""

    def __init__(self, db_path: str = "factgraph.db"):
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None

    def initialize(self) -> None:
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA foreign_keys=ON")
            self.conn.executescript("""
                CREATE TABLE IF NOT EXISTS graphs (
                    name TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS facts (
                    graph TEXT NOT NULL,
                    subject TEXT NOT NULL,
                    predicate TEXT NOT NULL,
                    fact TEXT NOT NULL,
                    PRIMARY KEY (graph, fact),
                    FOREIGN KEY (graph) REFERENCES graphs(name) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_facts_sp ON facts(graph, subject, predicate);
            """)
            self.conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"cannot open {self.db_path}: {e}") from e

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None

    def new_graph(self, name: str) -> StoredGraph:
        try:
            self._connection().execute(
                "INSERT INTO graphs (name, created_at) VALUES (?, ?)",
                (name, datetime.now(timezone.utc).isoformat()),
            )
            self.conn.commit()
        except sqlite3.IntegrityError:
            raise GraphExistsError(name) from None
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        logger.debug("Created SQLite graph %s in %s", name, self.db_path)
        return _SQLiteGraph(self, name)

    def graph(self, name: str) -> StoredGraph:
        row = self._fetchone("SELECT name FROM graphs WHERE name = ?", (name,))
        if row is None:
            raise GraphNotFoundError(name)
        return _SQLiteGraph(self, name)

    def delete_graph(self, name: str) -> None:
        cursor = self._execute("DELETE FROM graphs WHERE name = ?", (name,))
        if cursor.rowcount == 0:
            raise GraphNotFoundError(name)

    def graph_names(self) -> list[str]:
        rows = self._fetchall("SELECT name FROM graphs ORDER BY name", ())
        return [row["name"] for row in rows]

    def _connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise StoreError("store is not initialized")
        return self.conn

    def _execute(self, query: str, params: tuple) -> sqlite3.Cursor:
        try:
            cursor = self._connection().execute(query, params)
            self.conn.commit()
            return cursor
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def _write(self, query: str, rows: list) -> None:
        try:
            self._connection().executemany(query, rows)
            self.conn.commit()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def _fetchone(self, query: str, params: tuple):
        try:
            return self._connection().execute(query, params).fetchone()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def _fetchall(self, query: str, params: tuple) -> list:
        try:
            return self._connection().execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e


# Process-wide store used when no store is passed explicitly.
DEFAULT_STORE = MemoryStore()
