"""
Direct tests of the service layer.

These cover behaviour that is hard to reach through HTTP, chiefly the
storage constraints that back up the services' own checks when two
requests race past them.
"""

import sqlite3

import pytest

from bookshelf_api.app.core.exceptions import (
    ConflictError,
    IntegrityError,
    NotFoundError,
    ValidationError,
)
from bookshelf_api.app.schemas.book import BookCreate, BookStatus, BookUpdate
from bookshelf_api.app.schemas.genre import GenreCreate
from bookshelf_api.app.schemas.user import UserCreate
from bookshelf_api.app.services.book_service import BookService
from bookshelf_api.app.services.genre_service import GenreService
from bookshelf_api.app.services.user_service import UserService


def _count(db, table):
    conn = db.get_connection()
    try:
        return conn.execute(f"SELECT COUNT(*) AS n FROM {table}").fetchone()["n"]
    finally:
        conn.close()


@pytest.mark.asyncio
async def test_lost_genre_race_is_a_conflict(db, monkeypatch):
    """Simulate two requests that both passed the name check."""
    service = GenreService(db)
    monkeypatch.setattr(GenreService, "_find_by_name", staticmethod(lambda conn, name: None))

    await service.create_genre(GenreCreate(name="Fantasy"))
    with pytest.raises(ConflictError):
        await service.create_genre(GenreCreate(name="Fantasy"))
    assert _count(db, "genres") == 1


@pytest.mark.asyncio
async def test_lost_rename_race_is_a_conflict(db, monkeypatch):
    service = GenreService(db)
    await service.create_genre(GenreCreate(name="Fantasy"))
    history = await service.create_genre(GenreCreate(name="History"))
    monkeypatch.setattr(GenreService, "_find_by_name", staticmethod(lambda conn, name: None))

    with pytest.raises(ConflictError):
        await service.update_genre(history.id, GenreCreate(name="Fantasy"))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "second",
    [
        {"username": "sam", "email": "other@shire.me"},
        {"username": "samwise", "email": "sam@shire.me"},
    ],
)
async def test_lost_registration_race_is_a_conflict(db, settings, monkeypatch, second):
    """Both registrations passed the lookup; the UNIQUE constraint decides."""
    service = UserService(db, settings)
    monkeypatch.setattr(UserService, "_find_existing", staticmethod(lambda conn, username, email: None))

    await service.register(UserCreate(username="sam", email="sam@shire.me", password="x"))
    with pytest.raises(ConflictError):
        await service.register(UserCreate(password="x", **second))
    assert _count(db, "users") == 1


@pytest.mark.asyncio
async def test_registered_password_is_hashed(db, settings):
    await UserService(db, settings).register(UserCreate(username="sam", email="sam@shire.me", password="secret"))
    conn = db.get_connection()
    try:
        stored = conn.execute("SELECT password FROM users").fetchone()["password"]
    finally:
        conn.close()
    assert stored != "secret"
    assert "$" in stored


@pytest.mark.asyncio
async def test_foreign_key_blocks_genre_delete_race(db, monkeypatch):
    """A book added after the reference check still blocks the delete."""
    genres = GenreService(db)
    books = BookService(db)
    genre = await genres.create_genre(GenreCreate(name="Fantasy"))
    await books.create_book(BookCreate(title="The Hobbit", author="Tolkien", genre_id=genre.id))

    original_execute = sqlite3.Connection.execute

    class SkipReferenceCheck(sqlite3.Connection):
        def execute(self, sql, *args):
            if sql.startswith("SELECT 1 FROM books"):
                sql = "SELECT 1 WHERE 0"
                args = ()
            return original_execute(self, sql, *args)

    def connect_without_check():
        conn = sqlite3.connect(db.path, factory=SkipReferenceCheck)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    monkeypatch.setattr(db, "get_connection", connect_without_check)
    with pytest.raises(IntegrityError):
        await genres.delete_genre(genre.id)
    monkeypatch.undo()
    assert _count(db, "genres") == 1


@pytest.mark.asyncio
async def test_book_patch_tri_state_cover_image(db):
    genre = await GenreService(db).create_genre(GenreCreate(name="Fantasy"))
    service = BookService(db)
    book = await service.create_book(
        BookCreate(title="The Hobbit", author="Tolkien", genre_id=genre.id, cover_image="http://img")
    )

    kept = await service.update_book(book.id, BookUpdate(status="in_progress"))
    assert kept.cover_image == "http://img"
    assert kept.status is BookStatus.IN_PROGRESS

    cleared = await service.update_book(book.id, BookUpdate(cover_image=None))
    assert cleared.cover_image is None
    assert cleared.title == "The Hobbit"


@pytest.mark.asyncio
async def test_book_service_errors(db):
    service = BookService(db)
    with pytest.raises(ValidationError):
        await service.create_book(BookCreate(title="A", author="B"))
    with pytest.raises(NotFoundError):
        await service.get_book(1)
    with pytest.raises(NotFoundError):
        await service.delete_book(1)
    with pytest.raises(ValidationError):
        await service.search_books(status="archived")


@pytest.mark.asyncio
async def test_new_genre_reports_zero_books(db):
    genre = await GenreService(db).create_genre(GenreCreate(name="  Poetry  "))
    assert genre.name == "Poetry"
    assert genre.book_count == 0
