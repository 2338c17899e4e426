"""
FastAPI dependencies that hand services to the endpoints.

The application factory owns the ``Database`` and ``Settings`` and
stores them on ``app.state``; these helpers read them back for each
request.
"""

from fastapi import Request

from bookshelf_api.app.core.config import Settings
from bookshelf_api.app.core.db import Database
from bookshelf_api.app.services.book_service import BookService
from bookshelf_api.app.services.genre_service import GenreService
from bookshelf_api.app.services.user_service import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_user_service(request: Request) -> UserService:
    return UserService(get_database(request), get_settings(request))


def get_genre_service(request: Request) -> GenreService:
    return GenreService(get_database(request))


def get_book_service(request: Request) -> BookService:
    return BookService(get_database(request))
