"""Logging setup for the command line and interactive sessions."""

from __future__ import annotations

import logging

DEFAULT_FORMAT = "%(levelname)s:%(name)s:%(message)s"

_VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def level_for(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level (0 → WARNING, 2+ → DEBUG)."""

    verbosity = max(0, verbosity)
    return _VERBOSITY_LEVELS[min(verbosity, len(_VERBOSITY_LEVELS) - 1)]


def get_logger(name: str = "ecgsim", level: int | str = logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Return the ``name`` logger with a single stream handler attached.

    Calling this repeatedly adjusts the level but never stacks handlers, so
    the ``ecgsim.*`` module loggers print each record once.
    """

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
