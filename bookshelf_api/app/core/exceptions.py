"""
Domain error taxonomy.

Services raise these exceptions instead of ``HTTPException`` so that
they stay independent of the web layer.  Each class carries the HTTP
status code it maps to; the handlers registered in ``main.py`` render
every error as ``{"error": message}``.
"""

from typing import Optional

from fastapi import status


class BookshelfError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BookshelfError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(BookshelfError):
    """Bad, missing or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class MissingTokenError(AuthError):
    default_message = "No token provided"


class InvalidTokenError(AuthError):
    default_message = "Invalid token"


class TokenExpiredError(AuthError):
    default_message = "Token expired"


class ConflictError(BookshelfError):
    """A uniqueness constraint would be violated."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class NotFoundError(BookshelfError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class IntegrityError(BookshelfError):
    """A delete is blocked because other records still depend on the target."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource is still referenced"


class InternalError(BookshelfError):
    pass


class ConfigError(BookshelfError):
    """Required configuration is missing.  Raised at start-up, never per request."""

    default_message = "Invalid configuration"
