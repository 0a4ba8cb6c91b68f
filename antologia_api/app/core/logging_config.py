"""
Logging setup for the Antologia API.

All output goes through the root logger: a console handler, plus a
rotating file handler when ``LOG_FILE`` is set.  uvicorn's own loggers
are stripped of their handlers and made to propagate, so server and
access lines share the application's format and destinations instead
of being printed twice in two formats.

``setup_logging`` may run more than once per process (every
``create_app`` call does).  Handlers are tagged with a name and only
the missing ones are added.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

CONSOLE_HANDLER = "antologia-console"
FILE_HANDLER = "antologia-file"
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _has_handler(logger: logging.Logger, name: str) -> bool:
    return any(handler.get_name() == name for handler in logger.handlers)


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """Configure the root logger and route uvicorn's loggers into it.

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.  Unknown names fall back
        to ``INFO``.
    logfile : Optional[str]
        Path of a log file.  The file is rotated once it reaches
        ``max_bytes``, keeping ``backup_count`` old files.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if not _has_handler(root, CONSOLE_HANDLER):
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if logfile and not _has_handler(root, FILE_HANDLER):
        path = Path(logfile).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.set_name(FILE_HANDLER)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True

    return root
