"""logging_conf
===============
One place that decides how the ``nemo_previewer`` loggers look.

Every module does::

    from ..logging_conf import get_logger
    log = get_logger(__name__)

The first call hangs a single stderr handler off the package logger and stops
records from also reaching the root logger.  The level comes from the
environment:

*   ``NEMO_PREVIEWER_LOG_LEVEL`` – explicit level name (``DEBUG``, ``INFO`` …).
*   ``NEMO_DEBUG`` – nemo style debug channel list; ``Previewer`` or ``all``
    turns the previewer debug channel on.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from typing import Optional, Union

from .constants import DEBUG_CHANNEL, DEBUG_ENV, LOG_LEVEL_ENV

ROOT_LOGGER_NAME = "nemo_previewer"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_handler: Optional[logging.Handler] = None


def resolve_level(environ=None) -> int:
    """Work out the package log level from *environ* (defaults to os.environ)."""
    env = os.environ if environ is None else environ

    explicit = env.get(LOG_LEVEL_ENV, "").strip()
    if explicit:
        level = logging.getLevelName(explicit.upper())
        if isinstance(level, int):
            return level

    channels = {c.lower() for c in re.split(r"[,:\s]+", env.get(DEBUG_ENV, "")) if c}
    if DEBUG_CHANNEL in channels or "all" in channels:
        return logging.DEBUG
    return logging.INFO


def configure_logging(level: Union[int, str, None] = None) -> logging.Logger:
    """(Re)apply handler and level to the package logger and return it."""
    global _handler

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_handler)
        # One line per record, even when the host configured the root logger.
        root.propagate = False

    if level is None:
        level = resolve_level()
    elif isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)
    return root


def get_logger(name: str) -> logging.Logger:
    if _handler is None:
        configure_logging()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
