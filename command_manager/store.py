from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A storage operation failed (I/O, schema or constraint error)."""


_SCHEMA = """
CREATE TABLE IF NOT EXISTS namespaces (
    id INTEGER PRIMARY KEY,
    name VARCHAR(255) UNIQUE NOT NULL
);
CREATE TABLE IF NOT EXISTS commands (
    id INTEGER PRIMARY KEY,
    value TEXT NOT NULL,
    namespace_id INTEGER NOT NULL,
    FOREIGN KEY (namespace_id) REFERENCES namespaces(id) ON DELETE CASCADE
);
CREATE TABLE IF NOT EXISTS tags (
    id INTEGER PRIMARY KEY,
    name VARCHAR(255) UNIQUE NOT NULL,
    command_id INTEGER NOT NULL,
    FOREIGN KEY (command_id) REFERENCES commands(id) ON DELETE CASCADE
);
"""

# First-run content so the UI is never empty on a brand-new database.
FIXTURES: List[Tuple[str, str, str]] = [
    ("navigation", "cd ~/ && $SHELL", "nav:home"),
]


class SqliteStore:
    """
    SQLite-backed command store.

    Every public method opens its own short-lived connection, so a store object is
    cheap to keep around and never holds the database locked between keypresses.
    All `sqlite3.Error`s surface as `StoreError`.
    """

    def __init__(self, db_path: Path, *, timeout_s: float = 2.0) -> None:
        self.db_path = Path(db_path)
        self._timeout_s = timeout_s

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        con: Optional[sqlite3.Connection] = None
        try:
            con = sqlite3.connect(str(self.db_path), timeout=self._timeout_s)
            con.execute("PRAGMA foreign_keys = ON")
            with con:
                yield con
        except sqlite3.Error as e:
            logger.warning("sqlite error on %s: %s", self.db_path, e)
            raise StoreError(f"{self.db_path.name}: {e}") from e
        finally:
            if con is not None:
                con.close()

    def init(self, *, with_fixtures: bool = True) -> bool:
        """
        Create the schema. Returns True when the database was empty (brand new).

        Fixtures are only seeded into an empty database, so deleting the sample
        command does not bring it back on the next start.
        """
        with self._connect() as con:
            con.executescript(_SCHEMA)
            (n_ns,) = con.execute("SELECT count(*) FROM namespaces").fetchone()
            (n_cmd,) = con.execute("SELECT count(*) FROM commands").fetchone()
        fresh = n_ns == 0 and n_cmd == 0
        if fresh and with_fixtures:
            self.seed_fixtures()
        return fresh

    def seed_fixtures(self) -> None:
        for namespace, command, tag in FIXTURES:
            if self.find_namespace(namespace) is None:
                self.create_namespace(namespace)
            self.create_command_and_tag(command, tag, namespace)
        logger.info("seeded %d fixture command(s) into %s", len(FIXTURES), self.db_path)

    def counts(self) -> Tuple[int, int]:
        with self._connect() as con:
            (n_ns,) = con.execute("SELECT count(*) FROM namespaces").fetchone()
            (n_cmd,) = con.execute("SELECT count(*) FROM commands").fetchone()
        return int(n_ns), int(n_cmd)

    def list_namespaces(self) -> List[str]:
        with self._connect() as con:
            rows = con.execute("SELECT name FROM namespaces ORDER BY id").fetchall()
        return [r[0] for r in rows]

    def find_namespace(self, name: str) -> Optional[str]:
        with self._connect() as con:
            row = con.execute("SELECT name FROM namespaces WHERE name = ?", (name,)).fetchone()
        return row[0] if row else None

    def create_namespace(self, name: str) -> None:
        with self._connect() as con:
            con.execute("INSERT INTO namespaces (name) VALUES (?)", (name,))
        logger.info("created namespace %r", name)

    def delete_namespace(self, name: str) -> None:
        with self._connect() as con:
            # Databases created by early versions lack ON DELETE CASCADE.
            con.execute(
                """
                DELETE FROM tags WHERE command_id IN (
                    SELECT c.id FROM commands c
                    JOIN namespaces n ON n.id = c.namespace_id
                    WHERE n.name = ?
                )
                """,
                (name,),
            )
            con.execute(
                "DELETE FROM commands WHERE namespace_id = (SELECT id FROM namespaces WHERE name = ?)",
                (name,),
            )
            con.execute("DELETE FROM namespaces WHERE name = ?", (name,))
        logger.info("deleted namespace %r", name)

    def list_commands_and_tags(self, namespace: str) -> Tuple[List[str], List[str]]:
        with self._connect() as con:
            rows = con.execute(
                """
                SELECT c.value, t.name FROM commands c
                JOIN tags t ON t.command_id = c.id
                JOIN namespaces n ON n.id = c.namespace_id
                WHERE n.name = ?
                ORDER BY c.id
                """,
                (namespace,),
            ).fetchall()
        commands = [r[0] for r in rows]
        tags = [r[1] for r in rows]
        return commands, tags

    def find_command_by_tag(self, tag: str) -> Optional[Tuple[str, str]]:
        """Return `(command, namespace)` for a tag, if any."""
        with self._connect() as con:
            row = con.execute(
                """
                SELECT c.value, n.name FROM tags t
                JOIN commands c ON c.id = t.command_id
                JOIN namespaces n ON n.id = c.namespace_id
                WHERE t.name = ?
                """,
                (tag,),
            ).fetchone()
        return (row[0], row[1]) if row else None

    def create_command_and_tag(self, command: str, tag: str, namespace: str) -> None:
        with self._connect() as con:
            row = con.execute("SELECT id FROM namespaces WHERE name = ?", (namespace,)).fetchone()
            if row is None:
                raise StoreError(f"namespace {namespace!r} does not exist")
            cur = con.execute(
                "INSERT INTO commands (value, namespace_id) VALUES (?, ?)",
                (command, row[0]),
            )
            con.execute("INSERT INTO tags (name, command_id) VALUES (?, ?)", (tag, cur.lastrowid))
        logger.info("created command %r (tag %r) in %r", command, tag, namespace)

    def delete_command(self, command: str, namespace: str) -> None:
        with self._connect() as con:
            row = con.execute(
                """
                SELECT c.id FROM commands c
                JOIN namespaces n ON n.id = c.namespace_id
                WHERE c.value = ? AND n.name = ?
                ORDER BY c.id LIMIT 1
                """,
                (command, namespace),
            ).fetchone()
            if row is None:
                raise StoreError(f"command {command!r} not found in {namespace!r}")
            con.execute("DELETE FROM tags WHERE command_id = ?", (row[0],))
            con.execute("DELETE FROM commands WHERE id = ?", (row[0],))
        logger.info("deleted command %r from %r", command, namespace)
