"""Entry point for the Bookshelf API server.

Starts uvicorn on the application factory.  Configuration such as
``JWT_SECRET``, ``DATABASE_URL``, ``HOST`` and ``PORT`` is read from the
environment (see ``bookshelf_api/app/core/config.py``).  Settings are
validated before the server binds its socket, so a missing secret stops
the process immediately.

Usage:
    JWT_SECRET=change-me python run.py
"""
import logging
import sys

import uvicorn

from bookshelf_api.app.core.config import Settings
from bookshelf_api.app.core.exceptions import ConfigError


def main() -> None:
    settings = Settings()
    try:
        settings.validate()
    except ConfigError as exc:
        logging.basicConfig(level=logging.INFO)
        logging.error("Refusing to start: %s", exc.message)
        sys.exit(1)
    uvicorn.run(
        "bookshelf_api.app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
