"""
Root logger setup for the Bookshelf API.

Records go to stderr and, when ``LOG_FILE`` is set, to that file as
well.  Services log through ``logging.getLogger(__name__)`` and never
attach handlers themselves.
"""

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Apply ``LOG_LEVEL`` and attach the console/file handlers once.

    The level is updated on every call so that a second ``create_app``
    with different settings takes effect; handlers are left alone when
    the root logger already has some (pytest installs its own).  An
    unknown level name means ``INFO``.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if root.handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
