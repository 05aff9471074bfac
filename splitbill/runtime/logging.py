"""Logging setup for the splitbill namespace.

All package loggers hang off the ``splitbill`` logger, which gets a single
stderr handler the first time ``get_logger`` or ``configure_logging`` runs.

Usage:
    from splitbill.runtime import get_logger
    logger = get_logger(__name__)
    logger.info("Parsed %d items", count)

Environment variables:
    SPLITBILL_LOG_LEVEL: DEBUG, INFO, WARNING/WARN or ERROR. Default: INFO
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO
LOG_LEVEL_ENV = "SPLITBILL_LOG_LEVEL"
LOGGER_NAMESPACE = "splitbill"

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
# Line numbers only help while debugging
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_handler: logging.Handler | None = None


def parse_log_level(value: str | int | None, default: int = DEFAULT_LOG_LEVEL) -> int:
    """Turn a level name ("debug", "WARN") or number into a logging level."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    return LEVEL_NAMES.get(value.strip().upper(), default)


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | None = None) -> None:
    """Attach the stderr handler to the namespace logger once.

    Args:
        level: Explicit level; falls back to SPLITBILL_LOG_LEVEL, then INFO.
    """
    global _handler
    if _handler is not None:
        return

    if level is None:
        level = parse_log_level(os.environ.get(LOG_LEVEL_ENV))

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(_formatter_for(level))

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(level)
    namespace_logger.addHandler(_handler)
    namespace_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return the namespaced logger for a module name (typically ``__name__``)."""
    configure_logging()

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: str | int) -> int:
    """Change the namespace level at runtime and return the level applied."""
    configure_logging()
    resolved = parse_log_level(level)

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(resolved)
    for handler in namespace_logger.handlers:
        handler.setFormatter(_formatter_for(resolved))
    return resolved
