"""
Top-level package for the Bookshelf API.

All functionality lives in submodules under ``app``; import
``bookshelf_api.app.main.create_app`` to build the ASGI application.
"""

__all__ = []
