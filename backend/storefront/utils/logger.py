"""Logging configuration."""

import logging
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

from storefront.config import get_settings

settings = get_settings()

_QUIET_LOGGERS = ("uvicorn.access", "pymongo", "stripe", "httpx")


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        # Service identity on every record
        return jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
            static_fields={"service": settings.app_name, "environment": settings.environment},
        )
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure the root logger for the API and scripts.

    Args:
        level: Overrides ``settings.log_level``
        log_format: ``"json"`` or ``"text"``; overrides ``settings.log_format``
    """
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(_build_formatter(log_format or settings.log_format))
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info("Logging configured: level=%s, format=%s", level_name, log_format or settings.log_format)
