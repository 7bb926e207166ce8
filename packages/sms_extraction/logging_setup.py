"""Logging configuration for the ``sms_extraction`` package.

Entrypoints (the CLI, or a host application) call :func:`configure_logging`
once at startup to attach a single ``StreamHandler`` to the ``"sms_extraction"``
logger. Library modules only ever call :func:`get_logger` with a dotted child
name such as ``"sms_extraction.extract"`` and never attach handlers of their
own.

Messages follow a ``component:event key=value`` shape (for example
``extract:local_hit rule=paid_or_sent``) so they stay easy to grep.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "sms_extraction"
_LEVEL_ENV = "SMS_EXTRACTION_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_handler: logging.Handler | None = None


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(_LEVEL_ENV)
        if not level:
            return logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Attach the package handler exactly once.

    Parameters
    ----------
    level:
        ``int`` level or level name. ``None`` reads ``SMS_EXTRACTION_LOG_LEVEL``
        and falls back to ``INFO``.
    fmt:
        Optional ``logging.Formatter`` format string.
    stream:
        Destination stream; defaults to ``sys.stderr`` so stdout stays clean
        for command output.
    """

    global _handler
    if _handler is not None:
        return

    resolved = _resolve_level(level)
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for existing in list(logger.handlers):
        if isinstance(existing, logging.NullHandler):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False
    _handler = handler


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, silent until :func:`configure_logging` runs."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
