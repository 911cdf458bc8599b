"""Logging setup: stdlib handlers underneath, structlog for event-style logs.

Console plus a size- or daily-rotated file handler under ``settings.log_dir``. Idempotent
unless ``force=True`` so the app factory and tests can call it freely.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict

import structlog

from .config import LoggingSettings

LOG_FILE_NAME = "conversion.log"

_configured = False


def _file_handler(settings: LoggingSettings, log_file: Path, level: str) -> Dict[str, Any]:
    handler: Dict[str, Any] = {
        "filename": str(log_file),
        "formatter": "plain",
        "encoding": "utf-8",
        "level": level,
    }
    if settings.rotation == "time":
        handler.update(
            {
                "class": "logging.handlers.TimedRotatingFileHandler",
                "when": "midnight",
                "backupCount": settings.retention_days,
            }
        )
    else:
        handler.update(
            {
                "class": "logging.handlers.RotatingFileHandler",
                "maxBytes": settings.max_log_file_size_mb * 1024 * 1024,
                "backupCount": settings.backup_count,
            }
        )
    return handler


def _dict_config(settings: LoggingSettings, log_file: Path) -> Dict[str, Any]:
    level = settings.level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "%(asctime)s [%(levelname)s] %(name)s %(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "plain",
                "level": level,
            },
            "file": _file_handler(settings, log_file, level),
        },
        "root": {"handlers": ["console", "file"], "level": level},
    }


def configure_logging(settings: LoggingSettings, *, force: bool = False) -> None:
    global _configured
    if _configured and not force:
        return

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(_dict_config(settings, log_dir / LOG_FILE_NAME))

    level_value = getattr(logging, settings.level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger(name)


__all__ = ["configure_logging", "get_logger", "LOG_FILE_NAME"]
