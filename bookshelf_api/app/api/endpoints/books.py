"""
Book endpoints.

Reading and searching books is public; creating, updating and deleting
books requires a bearer token.  ``/books/search`` is declared before
``/books/{book_id}`` so the literal path wins.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from bookshelf_api.app.api.deps import get_book_service
from bookshelf_api.app.core.security import get_current_user_id
from bookshelf_api.app.schemas.book import BookCreate, BookRead, BookUpdate
from bookshelf_api.app.schemas.common import MAX_ROW_ID, MIN_ROW_ID
from bookshelf_api.app.services.book_service import BookService

router = APIRouter()


@router.get("", response_model=List[BookRead])
async def list_books(service: BookService = Depends(get_book_service)) -> List[BookRead]:
    """Return all books with their genre embedded."""
    return await service.list_books()


@router.get("/search", response_model=List[BookRead])
async def search_books(
    query: Optional[str] = Query(None, description="Substring of the title (case-insensitive)"),
    book_status: Optional[str] = Query(None, alias="status", description="to_read, in_progress or read"),
    genre_id: Optional[int] = Query(None, alias="genreId", ge=MIN_ROW_ID, le=MAX_ROW_ID),
    service: BookService = Depends(get_book_service),
) -> List[BookRead]:
    """Search books.

    Every supplied parameter narrows the result; a book must match all
    of them.
    """
    return await service.search_books(query=query, status=book_status, genre_id=genre_id)


@router.get("/{book_id}", response_model=BookRead)
async def get_book(
    book_id: int = Path(..., ge=MIN_ROW_ID, le=MAX_ROW_ID),
    service: BookService = Depends(get_book_service),
) -> BookRead:
    return await service.get_book(book_id)


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED)
async def create_book(
    book_in: BookCreate,
    user_id: int = Depends(get_current_user_id),
    service: BookService = Depends(get_book_service),
) -> BookRead:
    return await service.create_book(book_in)


@router.put("/{book_id}", response_model=BookRead)
async def update_book(
    book_in: BookUpdate,
    book_id: int = Path(..., ge=MIN_ROW_ID, le=MAX_ROW_ID),
    user_id: int = Depends(get_current_user_id),
    service: BookService = Depends(get_book_service),
) -> BookRead:
    """Partially update a book.

    Omitted fields keep their value.  Send ``"coverImage": null`` to
    remove the cover image.
    """
    return await service.update_book(book_id, book_in)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: int = Path(..., ge=MIN_ROW_ID, le=MAX_ROW_ID),
    user_id: int = Depends(get_current_user_id),
    service: BookService = Depends(get_book_service),
) -> Response:
    await service.delete_book(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
