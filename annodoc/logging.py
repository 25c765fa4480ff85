"""Logging utilities for annodoc commands.

Console lines carry an ``[annodoc]`` prefix. With ``--verbose`` the prefix
also names the logging component, for example ``[annodoc:builder]``.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "annodoc"

CONSOLE_FORMAT = "[%(component)s] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ComponentFormatter(logging.Formatter):
    """Formatter exposing ``%(component)s``: the logger name below ``annodoc``."""

    def __init__(self, fmt: str = CONSOLE_FORMAT, *, show_component: bool = False) -> None:
        super().__init__(fmt)
        self.show_component = show_component

    def format(self, record: logging.LogRecord) -> str:
        component = _LOGGER_NAME
        if self.show_component and record.name.startswith(f"{_LOGGER_NAME}."):
            component = f"{_LOGGER_NAME}:{record.name[len(_LOGGER_NAME) + 1:]}"
        record.component = component
        return super().format(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the annodoc hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the annodoc logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = reset_logging()
    logger.setLevel(level)
    logger.propagate = False

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(ComponentFormatter(show_component=verbose))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        # The file always records debug detail, whatever the console shows.
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    return logger


def reset_logging() -> logging.Logger:
    """Close annodoc handlers and hand records back to the root logger."""
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


__all__ = ["CONSOLE_FORMAT", "ComponentFormatter", "configure_logging", "get_logger", "reset_logging"]
