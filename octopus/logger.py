"""
octopus/logger.py
-----------------
Logging for the ``octopus`` command and library.

The ``octopus`` logger is set up once on import: progress lines
(``[MKDIR]``, ``[WRITE]``) and unknown-type warnings go to stderr, and
``OCTOPUS_LOG_FILE`` adds a DEBUG-level file log. The CLI adjusts the
console verbosity with :func:`set_console_level`.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

from octopus.config import CONFIG, get_log_level

ROOT_LOGGER_NAME = "octopus"
_CONSOLE_FORMAT = "%(levelname)-7s %(message)s"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_console_handler: logging.Handler | None = None


def _add_file_handler(root: logging.Logger, log_file: str) -> None:
    log_path = Path(log_file)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as exc:
        root.warning("Could not open log file '%s': %s", log_path, exc)
        return
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=_FILE_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(handler)


def _configure() -> None:
    global _console_handler
    if _console_handler is not None:
        return

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)

    _console_handler = logging.StreamHandler(sys.stderr)
    _console_handler.setLevel(get_log_level())
    _console_handler.setFormatter(logging.Formatter(fmt=_CONSOLE_FORMAT))
    root.addHandler(_console_handler)

    if CONFIG.logging.log_file:
        _add_file_handler(root, CONFIG.logging.log_file)


_configure()


def set_console_level(level: int) -> None:
    """Change how much reaches stderr; the file log keeps everything."""
    if _console_handler is not None:
        _console_handler.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the ``octopus`` hierarchy.

    Args:
        name: Usually ``__name__``; module names already inside the
              ``octopus`` package are used as they are.

    Example::

        log = get_logger(__name__)
        log.warning("[%s] unknown column type: %r", fmt, column.type)
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
