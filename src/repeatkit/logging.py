"""Library logging: silent by default, opt-in diagnostics for hosts.

Every repeatkit module logs through a child of the ``repeatkit`` logger:

    repeatkit.repeat        DEBUG  construct failure, loop termination
    repeatkit.delay         DEBUG  delay elapsed / deadline / cancelled
    repeatkit.operations    DEBUG  try limit reached
                            ERROR  escalation of an unclassified error
    repeatkit.cancellation  DEBUG  token fired
    repeatkit.retry         DEBUG  retry run started and failed

Importing the package only installs a ``NullHandler``. Hosts that want the
records on a stream call ``enable_logging`` (or set ``REPEATKIT_LOG_LEVEL``
and call ``configure_from_env``).
"""

from __future__ import annotations

import logging as py_logging
import os
import sys
from typing import TextIO

LOGGER_NAME = "repeatkit"
LOG_LEVEL_ENV = "REPEATKIT_LOG_LEVEL"
_HANDLER_NAME = "repeatkit.stream"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger() -> py_logging.Logger:
    return py_logging.getLogger(LOGGER_NAME)


def install_null_handler() -> None:
    logger = get_logger()
    if not any(isinstance(handler, py_logging.NullHandler) for handler in logger.handlers):
        logger.addHandler(py_logging.NullHandler())


def resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = py_logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def enable_logging(level: int | str = py_logging.DEBUG, stream: TextIO | None = None) -> py_logging.Handler:
    """Route repeatkit records at ``level`` and above to ``stream``.

    Replaces a handler installed by an earlier call; handlers the host
    attached itself are left alone.
    """
    resolved = resolve_level(level)
    disable_logging()

    handler = py_logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(resolved)
    handler.setFormatter(py_logging.Formatter(_FORMAT))

    logger = get_logger()
    logger.setLevel(resolved)
    logger.addHandler(handler)
    return handler


def disable_logging() -> None:
    logger = get_logger()
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)
            handler.close()


def configure_from_env() -> py_logging.Handler | None:
    level = os.getenv(LOG_LEVEL_ENV, "").strip()
    if not level:
        disable_logging()
        return None
    return enable_logging(level)
