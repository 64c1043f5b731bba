# src/edgarstream/logging_utils.py
"""
Logging utilities for edgarstream.

Logging is plain stdlib `logging`. Clients accept any `logging.Logger`;
`get_logger()` builds a ready-to-use one and is part of the public API.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO, Union


def get_logger(
    name: str = "edgarstream",
    level: Union[int, str] = logging.INFO,
    stream: Optional[TextIO] = None,
    fmt: str = "%(message)s",
    propagate: bool = False,
) -> logging.Logger:
    """
    Configure and return a logger with exactly one stream handler.

    Parameters
    ----------
    name:
        Logger name. Defaults to "edgarstream".
    level:
        Logging level (e.g., logging.INFO or "DEBUG").
    stream:
        Stream to log to. Defaults to sys.stdout.
    fmt:
        Logging format. Defaults to "%(message)s".
    propagate:
        Whether records also reach ancestor loggers.

    Returns
    -------
    logging.Logger
        Configured logger instance. Repeated calls reuse the same handler.
    """
    logger = logging.getLogger(name)

    if stream is None:
        stream = sys.stdout

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)
    logger.propagate = propagate

    for h in logger.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is stream:
            h.setLevel(level)
            h.setFormatter(logging.Formatter(fmt=fmt))
            return logger

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt))
    logger.addHandler(handler)

    return logger
