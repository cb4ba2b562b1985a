"""Logging setup shared by the apidoc commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "apidoc"
_CONSOLE_FORMAT = "[apidoc] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``apidoc`` or one of its children, e.g. ``apidoc.registry``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, fmt: str) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send apidoc records to stderr and, when given, to ``log_file``.

    Debug records (one per rendered method, one per written file) only appear
    on the console with ``verbose``; the log file always receives them.
    Calling this again replaces the previous handlers.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = get_logger()
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach(logger, logging.StreamHandler(), level, _CONSOLE_FORMAT)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(log_file, encoding="utf-8"), logging.DEBUG, _FILE_FORMAT)

    return logger


__all__ = ["configure_logging", "get_logger"]
