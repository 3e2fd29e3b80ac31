"""
Logging configuration for the API process.

``setup_logging`` attaches a console handler (and, when ``LOG_FILE`` is
set, a size-rotated file handler) to the root logger.  Uvicorn's own
loggers are routed through the same handlers so request logs and
application logs share one format.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers created by uvicorn with their own handlers.
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger once per process.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"info"``.  Unknown names
        fall back to ``INFO``.
    logfile : Optional[str]
        Optional path of a log file, rotated at 5 MB with three
        backups kept.
    """
    root = logging.getLogger()
    if root.handlers:
        # pytest and repeated create_app() calls land here
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(
            RotatingFileHandler(
                Path(logfile).resolve(),
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
