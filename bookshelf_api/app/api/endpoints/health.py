"""
Health check endpoint.  Public and always mounted at the root.
"""

from fastapi import APIRouter, Depends

from bookshelf_api.app.api.deps import get_database
from bookshelf_api.app.core.db import Database
from bookshelf_api.app.schemas.common import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(db: Database = Depends(get_database)) -> HealthResponse:
    """Report that the server is up and whether the database answers."""
    if db.ping():
        return HealthResponse(status="OK", message="Server is running", database="healthy")
    return HealthResponse(status="degraded", message="Database unavailable", database="unhealthy")
