"""
Shared schema helpers.

API payloads use camelCase keys (``genreId``, ``coverImage``,
``createdAt``) while the Python side keeps snake_case attribute names.
``CamelModel`` wires the two together: responses are serialised by
alias and requests accept either spelling.
"""

from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


# SQLite stores INTEGER values as signed 64-bit numbers; ids outside this
# range cannot be bound to a query.
MIN_ROW_ID = -(2**63)
MAX_ROW_ID = 2**63 - 1


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str


class HealthResponse(BaseModel):
    status: str
    message: str
    database: Optional[str] = None
