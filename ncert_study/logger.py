"""
Logging setup.

All modules log through the standard library under the ``ncert_study``
namespace. The first call to get_logger() attaches a rich handler to that
namespace so server, CLI and scripts share one consistent format:

    from ncert_study.logger import get_logger
    logger = get_logger(__name__)
"""

import logging

from rich.logging import RichHandler

from ncert_study.config import LOG_LEVEL

ROOT_LOGGER_NAME = "ncert_study"

_configured = False


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configure the package logger with a RichHandler.

    Safe to call more than once; only the level changes on later calls.

    Args:
        level: Level name (DEBUG, INFO, ...). Defaults to NCERT_LOG_LEVEL.

    Returns:
        The package root logger
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if level is not None or not _configured:
        root.setLevel(getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO))

    if not _configured:
        handler = RichHandler(
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s | %(message)s"))
        root.addHandler(handler)
        root.propagate = False
        _configured = True

    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace."""
    setup_logging()
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
