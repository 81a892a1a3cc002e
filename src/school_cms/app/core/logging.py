from __future__ import annotations

import json
import logging
from logging.config import dictConfig
from traceback import format_exception

from school_cms.app.settings import AppSettings, Env, get_app_settings

MAX_STACK_CHARS = 4000


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter for prod logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, object] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "pid": record.process,
            "message": record.getMessage(),
        }

        # HTTP context (only when present)
        http_ctx = {
            k: v
            for k, v in {
                "method": getattr(record, "http_method", None),
                "path": getattr(record, "path", None),
                "status": getattr(record, "status_code", None),
            }.items()
            if v is not None
        }
        if http_ctx:
            payload["http"] = http_ctx

        # Storage context, set by the attachment manager
        storage_key = getattr(record, "storage_key", None)
        if storage_key is not None:
            payload["storage_key"] = storage_key

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            exc_message = str(record.exc_info[1]) if record.exc_info[1] else None
            stack = "".join(format_exception(*record.exc_info))

            err_obj: dict[str, object] = {}
            if exc_type:
                err_obj["type"] = exc_type
            if exc_message:
                err_obj["message"] = exc_message
            err_obj["stack"] = stack[:MAX_STACK_CHARS] + (
                "...(truncated)" if len(stack) > MAX_STACK_CHARS else ""
            )
            payload["error"] = err_obj

        return json.dumps(payload, ensure_ascii=False)


def _read_level(settings: AppSettings) -> str:
    if settings.log_level:
        return settings.log_level.upper()
    # Local / Dev / Test are more verbose by default
    return "INFO" if settings.env is Env.PROD else "DEBUG"


def _read_format(settings: AppSettings) -> str:
    if settings.log_format:
        return settings.log_format.lower()
    return "json" if settings.env is Env.PROD else "plain"


def setup_logging(settings: AppSettings | None = None) -> None:
    settings = settings or get_app_settings()
    level = _read_level(settings)
    formatter_name = "json" if _read_format(settings) == "json" else "plain"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,  # keep uvicorn & friends
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)-5s [pid:%(process)d] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
            },
            "handlers": {
                "stream": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": formatter_name,
                }
            },
            "root": {
                "level": level,
                "handlers": ["stream"],
            },
            # Let uvicorn loggers bubble up to root handler/format,
            # but keep their level at INFO for sane noise in dev/test.
            "loggers": {
                "uvicorn": {"level": "INFO", "handlers": [], "propagate": True},
                "uvicorn.error": {"level": "INFO", "handlers": [], "propagate": True},
                "uvicorn.access": {"level": "INFO", "handlers": [], "propagate": True},
                "aiosqlite": {"level": "INFO", "handlers": [], "propagate": True},
                "botocore": {"level": "WARNING", "handlers": [], "propagate": True},
            },
        }
    )
