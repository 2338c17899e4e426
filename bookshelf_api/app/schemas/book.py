"""
Pydantic schemas for books.

A book belongs to exactly one genre and moves through three reading
states.  ``BookRead`` is the projection of a book joined with its
genre; the genre is embedded as ``{"id", "name"}`` or ``null`` when the
reference cannot be resolved.

``BookUpdate`` is applied as a partial patch.  The service inspects
``model_fields_set`` (via ``model_dump(exclude_unset=True)``) so that an
omitted ``coverImage`` keeps the stored value while an explicit
``null`` clears it.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from .common import MAX_ROW_ID, MIN_ROW_ID, CamelModel


class BookStatus(str, Enum):
    TO_READ = "to_read"
    IN_PROGRESS = "in_progress"
    READ = "read"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


class BookCreate(CamelModel):
    """Schema for creating a new book.

    ``status`` is kept as a plain string here and checked against
    ``BookStatus`` by the service so that an unknown value produces the
    same error message on create, update and search.
    """

    title: Optional[str] = Field(None, examples=["The Hobbit"])
    author: Optional[str] = Field(None, examples=["J.R.R. Tolkien"])
    genre_id: Optional[int] = Field(None, ge=MIN_ROW_ID, le=MAX_ROW_ID, examples=[4])
    status: Optional[str] = Field(None, examples=["to_read"])
    cover_image: Optional[str] = Field(None, examples=["https://example.com/hobbit.jpg"])


class BookUpdate(BookCreate):
    """Partial update; every field is optional."""


class GenreSummary(CamelModel):
    id: int
    name: str


class BookRead(CamelModel):
    id: int
    title: str
    author: str
    genre_id: int
    status: BookStatus
    cover_image: Optional[str] = None
    created_at: Optional[str] = None
    genre: Optional[GenreSummary] = None
