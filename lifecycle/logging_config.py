"""Logging configuration.

Development logs are plain text. With ``LOG_FORMAT=json`` every record is
written as one JSON object carrying the service fields and, where the
caller passed them as ``extra``, the workflow, process and course it is
about.
"""
from __future__ import annotations

import json
import logging
import logging.config
import time
from typing import Any

from lifecycle.config import Settings, get_settings

CONTEXT_FIELDS = (
    "service",
    "env",
    "version",
    "workflow_id",
    "process_id",
    "course_id",
    "action",
)


def _utc_timestamp(created: float) -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(created))


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "timestamp": _utc_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                base[key] = value

        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(base, ensure_ascii=True)


class ServiceFieldFilter(logging.Filter):
    """Stamp the service name, environment and version on every record."""

    def __init__(self, service: str, env: str | None = None, version: str | None = None) -> None:
        super().__init__()
        self.service = service
        self.env = env
        self.version = version

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "service", None) is None:
            record.service = self.service
        if getattr(record, "env", None) is None:
            record.env = self.env
        if getattr(record, "version", None) is None:
            record.version = self.version
        return True


def build_logging_config(settings: Settings) -> dict[str, Any]:
    """Build the ``dictConfig`` mapping for the given settings."""
    level = settings.log_level.upper()
    formatter = "json" if settings.log_format == "json" else "text"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {"()": "lifecycle.logging_config.JsonFormatter"},
        },
        "filters": {
            "service": {
                "()": "lifecycle.logging_config.ServiceFieldFilter",
                "service": settings.app_name,
                "env": settings.environment,
                "version": settings.app_version,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": formatter,
                "filters": ["service"],
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            "uvicorn": {"level": level},
            "sqlalchemy.engine": {"level": "INFO" if settings.db_echo else "WARNING"},
            "aiosqlite": {"level": "WARNING"},
            "lifecycle": {"level": level},
        },
    }


def setup_logging() -> None:
    """Configure logging from the application settings."""
    logging.config.dictConfig(build_logging_config(get_settings()))
