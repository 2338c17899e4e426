"""
Top-level router for the resource endpoints.

Aggregates the domain routers under their prefixes.  The application
factory mounts this router under ``Settings.api_prefix``; the health
check is mounted separately so it stays at ``/health``.
"""

from fastapi import APIRouter

from .endpoints import auth, books, genres

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(genres.router, prefix="/genres", tags=["genres"])
router.include_router(books.router, prefix="/books", tags=["books"])
