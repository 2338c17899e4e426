"""
Main entrypoint for the Bookshelf API.

This module assembles the FastAPI application: it validates settings,
sets up logging, creates the ``Database`` shared by all services,
registers the error handlers and includes the routers.  The
application is built by ``create_app`` rather than at import time
because building it requires a configured signing secret.  Run it with
uvicorn's factory mode, e.g.::

    JWT_SECRET=change-me uvicorn bookshelf_api.app.main:create_app --factory --reload

or use ``run.py`` from the project root.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.endpoints import health
from .api.router import router as api_router
from .core.config import Settings
from .core.db import Database
from .core.exceptions import BookshelfError
from .core.logging_config import setup_logging
from .schemas.common import ErrorResponse


logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump(), headers=headers)


def _describe_validation_error(exc: RequestValidationError) -> str:
    """Summarise pydantic errors as ``"<field>: <message>"`` pairs."""
    parts = []
    for error in exc.errors():
        location = [str(item) for item in error.get("loc", ()) if item not in ("body", "query", "path")]
        field = ".".join(location)
        parts.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Render every failure as ``{"error": message}``."""

    @app.exception_handler(BookshelfError)
    async def bookshelf_error_handler(request: Request, exc: BookshelfError) -> JSONResponse:
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        message = exc.message
        if exc.status_code >= 500:
            logger.error("Request to %s failed: %s", request.url.path, exc.message)
            if settings.is_production:
                message = "Internal Server Error"
        return _error_response(exc.status_code, message, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        message = "Internal Server Error" if settings.is_production else str(exc)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Settings to use; read from the environment when omitted.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.

    Raises
    ------
    ConfigError
        If required settings such as ``JWT_SECRET`` are missing.  The
        application refuses to start instead of failing per request.
    """
    settings = settings or Settings()
    settings.validate()

    # Initialise logging before anything else so that the rest of the
    # setup can log.
    setup_logging(settings.log_level, settings.log_file or None)

    db = Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s %s", settings.project_name, settings.api_version)
        db.init_db()
        logger.info("Database ready at %s", db.path)
        yield
        logger.info("Shutting down %s", settings.project_name)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_router, prefix=settings.api_prefix.rstrip("/"))

    return app
