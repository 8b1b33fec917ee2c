"""
Logging setup for the Nudge API.

Everything logs through the root logger: request failures from the
error middleware, MongoDB connect/close, stored uploads and every
create/update/delete.  Records go to stderr and, when ``LOG_FILE`` is
set, to that file as well.  The MongoDB driver loggers stay at WARNING
unless the level is DEBUG.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DRIVER_LOGGERS = ("pymongo",)


def _build_handlers(logfile: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        path = Path(logfile).resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Attach the API's handlers to the root logger.

    Does nothing when the root logger already has handlers, so building
    several apps in one process (the test suite does) configures logging
    once.  Unknown level names fall back to INFO.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _build_handlers(logfile):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if numeric_level > logging.DEBUG:
        for name in DRIVER_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
