"""Logging setup shared by the API server and the CLI.

Modules obtain loggers through :func:`get_logger`; :func:`setup_logging`
is called once from an entry point.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP and SDK loggers that log every request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "PIL")


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger for the bill extraction service.

    A handler is installed only once; later calls just adjust the level.
    Third-party request loggers stay at WARNING unless ``level`` is DEBUG.

    Args:
        level: Logging level name. Unknown names fall back to INFO.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
    root.setLevel(numeric_level)

    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, usually the caller's ``__name__``."""
    return logging.getLogger(name)
