"""
Pydantic schemas for genres.

Every genre returned by the API carries ``bookCount``, the number of
books currently referencing it.  Newly created genres report 0.
"""

from typing import Optional

from pydantic import Field

from .common import CamelModel


class GenreCreate(CamelModel):
    """Schema for creating or renaming a genre."""

    name: Optional[str] = Field(None, examples=["Fantasy"])


class GenreUpdate(GenreCreate):
    pass


class GenreRead(CamelModel):
    id: int
    name: str
    book_count: int = 0
