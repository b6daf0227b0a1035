"""
Logging configuration for the fractional car ownership backend.

Console output is colourised with colorlog in development. Rotating files
hold plain text (app.log, error.log), JSON (app.json.log) and the output
of the scheduled jobs and the Celery worker (jobs.log).
"""

import logging
import logging.config
import os
from datetime import datetime, timezone
from typing import Any, Dict, List

from pythonjsonlogger import jsonlogger

from app.config.settings import settings

# ``extra=`` keys copied into JSON records when present
CONTEXT_FIELDS = (
    "request_id",
    "actor_id",
    "method",
    "url",
    "status_code",
    "job",
    "operation",
    "error_code",
    "notification_type",
)

MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 10


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, environment and request/job context."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["environment"] = settings.ENVIRONMENT
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_record[name] = value

        if record.exc_info:
            log_record["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }


def _rotating(log_dir: str, filename: str, level: str, formatter: str) -> Dict[str, Any]:
    return {
        "level": level,
        "class": "logging.handlers.RotatingFileHandler",
        "filename": os.path.join(log_dir, filename),
        "maxBytes": MAX_BYTES,
        "backupCount": BACKUP_COUNT,
        "formatter": formatter,
        "encoding": "utf8",
    }


def _logger(handlers: List[str], level: str) -> Dict[str, Any]:
    return {"handlers": handlers, "level": level, "propagate": False}


def build_logging_config(log_dir: str) -> Dict[str, Any]:
    """dictConfig mapping writing files under ``log_dir``."""
    app_handlers = ["console", "file", "error_file", "json_file"]
    job_handlers = ["console", "jobs_file", "error_file", "json_file"]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            },
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(timestamp)s %(level)s %(logger)s %(message)s",
            },
            "colored": {
                "()": "colorlog.ColoredFormatter",
                "format": "%(log_color)s%(asctime)s [%(levelname)s]%(reset)s %(name)s: %(message)s",
                "log_colors": {
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "red,bg_white",
                },
            },
        },
        "handlers": {
            "console": {
                "level": "DEBUG" if settings.DEBUG else "INFO",
                "class": "logging.StreamHandler",
                "formatter": "colored" if settings.is_development() else "standard",
            },
            "file": _rotating(log_dir, "app.log", "INFO", "standard"),
            "error_file": _rotating(log_dir, "error.log", "ERROR", "standard"),
            "json_file": _rotating(log_dir, "app.json.log", "INFO", "json"),
            "jobs_file": _rotating(log_dir, "jobs.log", "INFO", "standard"),
        },
        "loggers": {
            "": {"handlers": app_handlers, "level": settings.LOG_LEVEL},
            "app": _logger(app_handlers, settings.LOG_LEVEL),
            "app.services.background": _logger(job_handlers, settings.LOG_LEVEL),
            "app.core.background_tasks": _logger(job_handlers, settings.LOG_LEVEL),
            "celery": _logger(job_handlers, "INFO"),
            "sqlalchemy.engine": _logger(["console", "file"], "INFO" if settings.DB_ECHO else "WARNING"),
            "uvicorn.access": _logger(["console"], "INFO"),
        },
    }


def setup_logging(log_dir: str = None) -> logging.Logger:
    """Configure application logging"""
    log_dir = log_dir or settings.LOG_DIR
    os.makedirs(log_dir, exist_ok=True)
    logging.config.dictConfig(build_logging_config(log_dir))
    logger = logging.getLogger("app")
    logger.info(f"Logging initialized with level: {settings.LOG_LEVEL}")
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
