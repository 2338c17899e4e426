"""
Service layer for genres.

Genres are looked up together with the number of books referencing
them (``LEFT JOIN books ... GROUP BY``), so a genre without books is
still listed with a count of 0.  Names are unique: the service checks
before writing and maps the UNIQUE constraint to ``ConflictError`` for
the case where two requests race past the check.  A genre that is
still referenced by books cannot be deleted.

All queries use parameterized statements.
"""

import logging
import sqlite3
from typing import List, Optional

from bookshelf_api.app.core.db import Database
from bookshelf_api.app.core.exceptions import (
    ConflictError,
    IntegrityError,
    NotFoundError,
    ValidationError,
)
from bookshelf_api.app.schemas.genre import GenreCreate, GenreRead, GenreUpdate


logger = logging.getLogger(__name__)

GENRE_WITH_COUNT_SQL = """
    SELECT g.id, g.name, COUNT(b.id) AS book_count
    FROM genres g
    LEFT JOIN books b ON b.genre_id = g.id
"""


class GenreService:
    """CRUD operations for genres."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def list_genres(self) -> List[GenreRead]:
        conn = self.db.get_connection()
        try:
            rows = conn.execute(
                GENRE_WITH_COUNT_SQL + " GROUP BY g.id ORDER BY g.id"
            ).fetchall()
            return [self._row_to_genre_read(row) for row in rows]
        finally:
            conn.close()

    async def get_genre(self, genre_id: int) -> GenreRead:
        """Return a genre with its book count or raise ``NotFoundError``."""
        conn = self.db.get_connection()
        try:
            return self._fetch_genre(conn, genre_id)
        finally:
            conn.close()

    async def create_genre(self, data: GenreCreate) -> GenreRead:
        name = self._clean_name(data.name)
        conn = self.db.get_connection()
        try:
            if self._find_by_name(conn, name) is not None:
                raise ConflictError("Genre with this name already exists")
            try:
                cursor = conn.execute("INSERT INTO genres (name) VALUES (?)", (name,))
            except sqlite3.IntegrityError:
                conn.rollback()
                raise ConflictError("Genre with this name already exists")
            genre_id = cursor.lastrowid
            conn.commit()
            logger.info("Created genre %s (%s)", genre_id, name)
            return self._fetch_genre(conn, genre_id)
        finally:
            conn.close()

    async def update_genre(self, genre_id: int, data: GenreUpdate) -> GenreRead:
        """Rename a genre.

        The new name may equal the current one; it only conflicts when
        a *different* genre already uses it.
        """
        name = self._clean_name(data.name)
        conn = self.db.get_connection()
        try:
            self._fetch_genre(conn, genre_id)
            owner = self._find_by_name(conn, name)
            if owner is not None and owner != genre_id:
                raise ConflictError("Genre with this name already exists")
            try:
                conn.execute("UPDATE genres SET name = ? WHERE id = ?", (name, genre_id))
            except sqlite3.IntegrityError:
                conn.rollback()
                raise ConflictError("Genre with this name already exists")
            conn.commit()
            logger.info("Renamed genre %s to %s", genre_id, name)
            return self._fetch_genre(conn, genre_id)
        finally:
            conn.close()

    async def delete_genre(self, genre_id: int) -> None:
        """Delete a genre that no book references.

        Raises ``NotFoundError`` for unknown ids and ``IntegrityError``
        while books still point at the genre.  The foreign key on
        ``books.genre_id`` rejects the delete if a book was added
        between the check and the statement.
        """
        message = "Cannot delete genre with associated books. Update or delete the books first."
        conn = self.db.get_connection()
        try:
            self._fetch_genre(conn, genre_id)
            referenced = conn.execute(
                "SELECT 1 FROM books WHERE genre_id = ? LIMIT 1", (genre_id,)
            ).fetchone()
            if referenced:
                logger.info("Refused to delete genre %s: books still reference it", genre_id)
                raise IntegrityError(message)
            try:
                conn.execute("DELETE FROM genres WHERE id = ?", (genre_id,))
            except sqlite3.IntegrityError:
                conn.rollback()
                raise IntegrityError(message)
            conn.commit()
            logger.info("Deleted genre %s", genre_id)
        finally:
            conn.close()

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Name is required")
        return cleaned

    @staticmethod
    def _find_by_name(conn: sqlite3.Connection, name: str) -> Optional[int]:
        row = conn.execute("SELECT id FROM genres WHERE name = ?", (name,)).fetchone()
        return row["id"] if row else None

    def _fetch_genre(self, conn: sqlite3.Connection, genre_id: int) -> GenreRead:
        row = conn.execute(
            GENRE_WITH_COUNT_SQL + " WHERE g.id = ? GROUP BY g.id", (genre_id,)
        ).fetchone()
        if not row:
            raise NotFoundError("Genre not found")
        return self._row_to_genre_read(row)

    @staticmethod
    def _row_to_genre_read(row: sqlite3.Row) -> GenreRead:
        return GenreRead(id=row["id"], name=row["name"], book_count=row["book_count"])
