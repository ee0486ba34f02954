"""
Logging configuration for the lesson booking service.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger.  Driver loggers are always capped at
WARNING, even when the root logger was configured elsewhere, so that
per-command debug output from ``pymongo`` does not drown out request
logs.  ``log_request`` is used by the HTTP middleware in ``main`` to
record each incoming request.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DRIVER_LOGGERS = ("pymongo", "motor")

request_logger = logging.getLogger("lesson_booking_api.requests")


def _handlers(logfile: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure logging for the service.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted, no file
        handler is added.

    Root handlers are added only once; a repeated ``create_app`` call or
    a test runner that already owns the root logger leaves them alone.
    """
    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in _handlers(logfile):
        root.addHandler(handler)


def log_request(method: str, url: str) -> None:
    request_logger.info("Incoming request: %s %s", method, url)
