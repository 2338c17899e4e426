"""
SQLite database integration and simple migration system.

The ``Database`` class wraps a database file path and hands out
connections (``get_connection``) and cursors (``get_cursor``).  An
instance is created by the application factory and passed to the
services, so nothing in this module holds a global connection.  It uses
SQLite as a lightweight embedded database; to switch to another DBMS
you would replace connection logic and adapt SQL syntax accordingly.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple


logger = logging.getLogger(__name__)


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS genres (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS books (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            author TEXT NOT NULL,
            genre_id INTEGER NOT NULL,
            status TEXT NOT NULL DEFAULT 'to_read'
                CHECK (status IN ('to_read', 'in_progress', 'read')),
            cover_image TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(genre_id) REFERENCES genres(id)
        );
        """,
    ),
    # Migration 2: indices for the filters used by book search
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_books_genre_id ON books(genre_id);
        CREATE INDEX IF NOT EXISTS idx_books_status ON books(status);
        """,
    ),
]


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are returned as is.  Relative paths are resolved
    against the project root (the directory containing the
    ``bookshelf_api`` package).
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


class Database:
    """Connection factory for a single SQLite database file."""

    def __init__(self, database_url: str) -> None:
        self.path = resolve_database_path(database_url)

    def get_connection(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        Rows are returned as ``sqlite3.Row`` so columns can be accessed
        by name.  Foreign key enforcement is switched on for every
        connection; SQLite leaves it off by default and the ``books``
        table relies on it to reject dangling genre references.
        """
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def get_cursor(self) -> Iterator[sqlite3.Cursor]:
        """Context manager that yields a cursor, commits on success and closes the connection."""
        conn = self.get_connection()
        try:
            yield conn.cursor()
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """Initialise the database and apply pending migrations.

        Creates the ``migrations`` table if it does not exist, checks the
        current schema version, and applies any new entries of
        ``MIGRATIONS``.  If you add a migration, append it with an
        incremented version number.
        """
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with self.get_cursor() as cursor:
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            cursor.execute("SELECT MAX(version) AS version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    cursor.executescript(sql)
                    cursor.execute(
                        "INSERT INTO migrations (version) VALUES (?)", (version,)
                    )
                    current_version = version
                    logger.info("Applied migration %s", version)

    def ping(self) -> bool:
        """Return ``True`` if a trivial query succeeds."""
        try:
            with self.get_cursor() as cursor:
                cursor.execute("SELECT 1").fetchone()
            return True
        except sqlite3.Error as exc:
            logger.error("Database ping failed: %s", exc)
            return False
