"""Logging setup shared by the repolens CLI and analyzers."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_ROOT_LOGGER = "repolens"
_CONSOLE_FORMAT = "[repolens] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``repolens.<name>``, or the package logger when ``name`` is empty."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}" if name else _ROOT_LOGGER)


def _attach(
    logger: logging.Logger, handler: logging.Handler, level: int, fmt: str
) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)


def reset_logging() -> logging.Logger:
    """Close repolens handlers and hand records back to the root logger."""
    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logging(
    *, verbose: bool = False, log_file: str | Path | None = None
) -> logging.Logger:
    """Send repolens records to stderr and, when given, to ``log_file``.

    Calling it again replaces the previous handlers. The log file's parent
    directory is created if needed and the file is appended to.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = reset_logging()
    logger.setLevel(level)
    logger.propagate = False

    _attach(logger, logging.StreamHandler(sys.stderr), level, _CONSOLE_FORMAT)
    if log_file is not None:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(path, encoding="utf-8"), level, _FILE_FORMAT)

    return logger


__all__ = ["configure_logging", "get_logger", "reset_logging"]
