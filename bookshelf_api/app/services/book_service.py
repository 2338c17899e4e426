"""
Service layer for books.

Books are always read joined with their genre so that every result is
a ``BookRead`` with the genre embedded.  Writes validate the reading
status against ``BookStatus`` and check that the referenced genre
exists; the foreign key on ``books.genre_id`` backs that check up, and
a violation reported by SQLite is turned into the same
``ValidationError``.

Updates are partial.  ``title``, ``author``, ``genre_id`` and ``status``
keep their stored value unless a non-empty value is supplied.
``cover_image`` distinguishes an omitted key (keep) from an explicit
``null`` or empty string (clear).
"""

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from bookshelf_api.app.core.db import Database
from bookshelf_api.app.core.exceptions import NotFoundError, ValidationError
from bookshelf_api.app.schemas.book import (
    BookCreate,
    BookRead,
    BookStatus,
    BookUpdate,
    GenreSummary,
)


logger = logging.getLogger(__name__)

BOOK_WITH_GENRE_SQL = """
    SELECT b.id, b.title, b.author, b.genre_id, b.status, b.cover_image, b.created_at,
           g.id AS g_id, g.name AS g_name
    FROM books b
    LEFT JOIN genres g ON g.id = b.genre_id
"""


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BookService:
    """CRUD and search operations for books."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def list_books(self) -> List[BookRead]:
        return await self.search_books()

    async def get_book(self, book_id: int) -> BookRead:
        conn = self.db.get_connection()
        try:
            return self._fetch_book(conn, book_id)
        finally:
            conn.close()

    async def create_book(self, data: BookCreate) -> BookRead:
        """Insert a new book and return it joined with its genre.

        ``title``, ``author`` and ``genre_id`` are required; ``status``
        defaults to ``to_read``.
        """
        title = (data.title or "").strip()
        author = (data.author or "").strip()
        if not title or not author or not data.genre_id:
            raise ValidationError("Title, author, and genre ID are required")
        status = self._validate_status(data.status) or BookStatus.TO_READ
        cover_image = data.cover_image or None

        conn = self.db.get_connection()
        try:
            self._ensure_genre_exists(conn, data.genre_id)
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO books (title, author, genre_id, status, cover_image)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (title, author, data.genre_id, status.value, cover_image),
                )
            except sqlite3.IntegrityError:
                conn.rollback()
                raise ValidationError(f"Genre {data.genre_id} does not exist")
            book_id = cursor.lastrowid
            conn.commit()
            logger.info("Created book %s (%s)", book_id, title)
            return self._fetch_book(conn, book_id)
        finally:
            conn.close()

    async def update_book(self, book_id: int, data: BookUpdate) -> BookRead:
        """Apply a partial update to a book.

        Only keys present in the request are considered (``exclude_unset``),
        which is what lets ``cover_image: null`` clear the cover while an
        omitted ``cover_image`` leaves it untouched.
        """
        updates: Dict[str, Any] = data.model_dump(exclude_unset=True)
        status = self._validate_status(updates.get("status"))

        conn = self.db.get_connection()
        try:
            current = self._fetch_row(conn, book_id)
            title = (updates.get("title") or "").strip() or current["title"]
            author = (updates.get("author") or "").strip() or current["author"]
            genre_id = updates.get("genre_id") or current["genre_id"]
            new_status = status.value if status else current["status"]
            if "cover_image" in updates:
                cover_image = updates["cover_image"] or None
            else:
                cover_image = current["cover_image"]

            if genre_id != current["genre_id"]:
                self._ensure_genre_exists(conn, genre_id)
            try:
                conn.execute(
                    """
                    UPDATE books
                    SET title = ?, author = ?, genre_id = ?, status = ?, cover_image = ?
                    WHERE id = ?
                    """,
                    (title, author, genre_id, new_status, cover_image, book_id),
                )
            except sqlite3.IntegrityError:
                conn.rollback()
                raise ValidationError(f"Genre {genre_id} does not exist")
            conn.commit()
            logger.info("Updated book %s (fields: %s)", book_id, ", ".join(sorted(updates)) or "none")
            return self._fetch_book(conn, book_id)
        finally:
            conn.close()

    async def delete_book(self, book_id: int) -> None:
        conn = self.db.get_connection()
        try:
            cursor = conn.execute("DELETE FROM books WHERE id = ?", (book_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("Book not found")
            conn.commit()
            logger.info("Deleted book %s", book_id)
        finally:
            conn.close()

    async def search_books(
        self,
        query: Optional[str] = None,
        status: Optional[str] = None,
        genre_id: Optional[int] = None,
    ) -> List[BookRead]:
        """Return books matching *all* of the supplied filters.

        ``query`` is a case-insensitive substring of the title, ``status``
        must be a valid ``BookStatus`` and ``genre_id`` is matched
        exactly.  Filters left as ``None`` (or empty) are ignored, so a
        call without arguments lists every book.
        """
        conditions: List[str] = []
        params: List[Any] = []
        if query:
            conditions.append("b.title LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(query)}%")
        valid_status = self._validate_status(status)
        if valid_status:
            conditions.append("b.status = ?")
            params.append(valid_status.value)
        if genre_id is not None:
            conditions.append("b.genre_id = ?")
            params.append(genre_id)

        sql = BOOK_WITH_GENRE_SQL
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += " ORDER BY b.id"

        conn = self.db.get_connection()
        try:
            rows = conn.execute(sql, params).fetchall()
            return [self._row_to_book_read(row) for row in rows]
        finally:
            conn.close()

    @staticmethod
    def _validate_status(status: Optional[str]) -> Optional[BookStatus]:
        if not status:
            return None
        try:
            return BookStatus(status)
        except ValueError:
            raise ValidationError(
                "Status must be one of: " + ", ".join(BookStatus.values())
            )

    @staticmethod
    def _ensure_genre_exists(conn: sqlite3.Connection, genre_id: int) -> None:
        row = conn.execute("SELECT 1 FROM genres WHERE id = ?", (genre_id,)).fetchone()
        if not row:
            raise ValidationError(f"Genre {genre_id} does not exist")

    @staticmethod
    def _fetch_row(conn: sqlite3.Connection, book_id: int) -> sqlite3.Row:
        row = conn.execute(BOOK_WITH_GENRE_SQL + " WHERE b.id = ?", (book_id,)).fetchone()
        if not row:
            raise NotFoundError("Book not found")
        return row

    def _fetch_book(self, conn: sqlite3.Connection, book_id: int) -> BookRead:
        return self._row_to_book_read(self._fetch_row(conn, book_id))

    @staticmethod
    def _row_to_book_read(row: sqlite3.Row) -> BookRead:
        genre = None
        if row["g_id"] is not None:
            genre = GenreSummary(id=row["g_id"], name=row["g_name"])
        return BookRead(
            id=row["id"],
            title=row["title"],
            author=row["author"],
            genre_id=row["genre_id"],
            status=row["status"],
            cover_image=row["cover_image"],
            created_at=row["created_at"],
            genre=genre,
        )
