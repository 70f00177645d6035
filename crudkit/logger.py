"""
Logging setup for the library and the command line.

Records from every ``crudkit.*`` module propagate to the package logger.
Its level follows ``app.debug``, so verbose output can be switched on
without making third-party libraries chatty. Root handlers write to the
console and, unless disabled, to a rotating file.
"""

from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any

from .config import LoggingSettings, Settings, get_settings

PACKAGE_LOGGER = __name__.partition(".")[0]

_configured = False


def _level(name: str) -> int:
    numeric_level = logging.getLevelName(name.upper())
    if isinstance(numeric_level, int):
        return numeric_level
    raise ValueError(f"Unsupported log level: {name}")


def _handlers(log_settings: LoggingSettings) -> dict[str, dict[str, Any]]:
    # Handlers carry no level; loggers decide what gets through.
    handlers: dict[str, dict[str, Any]] = {
        "console": {"class": "logging.StreamHandler", "formatter": "standard"},
    }
    if log_settings.to_file:
        log_settings.directory.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "standard",
            "filename": str(log_settings.directory / log_settings.file_name),
            "encoding": "utf-8",
            "maxBytes": log_settings.max_bytes,
            "backupCount": log_settings.backup_count,
        }
    return handlers


def _build_logging_config(settings: Settings) -> dict[str, Any]:
    root_level = _level(settings.logging.level)
    handlers = _handlers(settings.logging)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": settings.logging.format}},
        "handlers": handlers,
        "loggers": {
            PACKAGE_LOGGER: {"level": logging.DEBUG if settings.app.debug else root_level},
            "sqlalchemy.engine": {
                "level": logging.INFO if settings.database.echo else logging.WARNING,
            },
        },
        "root": {"level": root_level, "handlers": list(handlers)},
    }


def setup_logging(settings: Settings | None = None) -> None:
    """Apply the logging configuration; later calls are no-ops."""

    global _configured

    if _configured:
        return
    dictConfig(_build_logging_config(settings or get_settings()))
    _configured = True


__all__ = ["PACKAGE_LOGGER", "setup_logging"]
