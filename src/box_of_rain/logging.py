"""
Logging utilities for box-of-rain.

Library modules only emit DEBUG records through child loggers of the
``box_of_rain`` logger; handlers are configured by applications (the CLI
calls ``setup_logging``).
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

# Package root logger
_root_logger = logging.getLogger("box_of_rain")
_root_logger.addHandler(logging.NullHandler())
_level_before_disable: int = logging.NOTSET


def _coerce_level(level: str | int) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(
    level: str | int = "WARNING",
    format: str | None = None,
    stream: TextIO | None = None,
    file: str | None = None,
) -> None:
    """
    Configure logging for box-of-rain.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int
        format: Custom log format string
        stream: Output stream (defaults to stderr)
        file: Optional file path to write logs

    Example:
        from box_of_rain.logging import setup_logging

        setup_logging("DEBUG")
        setup_logging("INFO", file="layout.log")
    """
    level = _coerce_level(level)
    _root_logger.setLevel(level)
    _root_logger.handlers.clear()

    if format is None:
        format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    formatter = logging.Formatter(format)

    stream_handler = logging.StreamHandler(stream or sys.stderr)
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(level)
    _root_logger.addHandler(stream_handler)

    if file:
        file_handler = logging.FileHandler(file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        _root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger for a submodule.

    Args:
        name: Submodule name ("layout") or a dotted module path
            ("box_of_rain.layout.engine")

    Returns:
        Logger instance
    """
    if name == "box_of_rain" or name.startswith("box_of_rain."):
        return logging.getLogger(name)
    return logging.getLogger(f"box_of_rain.{name}")


def set_level(level: str | int) -> None:
    """Set the log level for box-of-rain."""
    _root_logger.setLevel(_coerce_level(level))


def disable() -> None:
    """Disable all logging for box-of-rain.

    Child loggers ignore the package logger's ``disabled`` flag, so the
    level is raised above CRITICAL as well and restored by ``enable``.
    """
    global _level_before_disable
    if not _root_logger.disabled:
        _level_before_disable = _root_logger.level
    _root_logger.disabled = True
    _root_logger.setLevel(logging.CRITICAL + 1)


def enable() -> None:
    """Re-enable logging for box-of-rain."""
    if _root_logger.disabled:
        _root_logger.setLevel(_level_before_disable)
    _root_logger.disabled = False
