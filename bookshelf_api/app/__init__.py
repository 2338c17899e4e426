"""
Application package.

The API is organised by concern: ``core`` holds configuration,
persistence, security and errors; ``schemas`` the request/response
models; ``services`` the business rules; ``api`` the HTTP routes.
``create_app`` in ``main`` wires them together.
"""

from .main import create_app  # noqa: F401
