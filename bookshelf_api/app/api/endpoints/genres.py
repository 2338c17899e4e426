"""
Genre endpoints.

Every genre endpoint is public.  A genre can only be deleted once no
book references it.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from bookshelf_api.app.api.deps import get_genre_service
from bookshelf_api.app.schemas.common import MAX_ROW_ID, MIN_ROW_ID
from bookshelf_api.app.schemas.genre import GenreCreate, GenreRead, GenreUpdate
from bookshelf_api.app.services.genre_service import GenreService

router = APIRouter()


@router.get("", response_model=List[GenreRead])
async def list_genres(service: GenreService = Depends(get_genre_service)) -> List[GenreRead]:
    """Return all genres with the number of books in each."""
    return await service.list_genres()


@router.get("/{genre_id}", response_model=GenreRead)
async def get_genre(
    genre_id: int = Path(..., ge=MIN_ROW_ID, le=MAX_ROW_ID),
    service: GenreService = Depends(get_genre_service),
) -> GenreRead:
    return await service.get_genre(genre_id)


@router.post("", response_model=GenreRead, status_code=status.HTTP_201_CREATED)
async def create_genre(
    genre_in: GenreCreate,
    service: GenreService = Depends(get_genre_service),
) -> GenreRead:
    return await service.create_genre(genre_in)


@router.put("/{genre_id}", response_model=GenreRead)
async def update_genre(
    genre_in: GenreUpdate,
    genre_id: int = Path(..., ge=MIN_ROW_ID, le=MAX_ROW_ID),
    service: GenreService = Depends(get_genre_service),
) -> GenreRead:
    return await service.update_genre(genre_id, genre_in)


@router.delete("/{genre_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_genre(
    genre_id: int = Path(..., ge=MIN_ROW_ID, le=MAX_ROW_ID),
    service: GenreService = Depends(get_genre_service),
) -> Response:
    """Delete a genre.

    Returns 400 while books still reference the genre; reassign or
    delete those books first.
    """
    await service.delete_genre(genre_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
