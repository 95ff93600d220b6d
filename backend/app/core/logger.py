import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from app.config import settings

SERVICE_NAME = "tasktimer-backend"
EXTRA_FIELDS = (
    "request_id",
    "user_id",
    "path",
    "method",
    "status_code",
    "duration_ms",
    "task_ref",
    "action",
)


def json_formatter(record: logging.LogRecord) -> str:
    log = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": record.levelname,
        "service": SERVICE_NAME,
        "logger": record.name,
        "message": record.getMessage(),
    }

    for field in EXTRA_FIELDS:
        if hasattr(record, field):
            log[field] = getattr(record, field)

    if record.exc_info:
        log["exception"] = logging.Formatter().formatException(record.exc_info)

    return json.dumps(log, default=str)


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json_formatter(record)


def _build_logger() -> logging.Logger:
    log = logging.getLogger("tasktimer")
    log.setLevel(settings.LOG_LEVEL.upper())

    if log.handlers:
        return log

    json_f = JSONFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(json_f)
    log.addHandler(console_handler)

    if settings.LOG_FILE:
        log_dir = os.path.dirname(settings.LOG_FILE)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            settings.LOG_FILE,
            maxBytes=5 * 1024 * 1024,
            backupCount=5
        )
        file_handler.setFormatter(json_f)
        log.addHandler(file_handler)

    return log


logger = _build_logger()


def get_logger(name: str) -> logging.Logger:
    """Child logger sharing the JSON handlers, e.g. ``tasktimer.timer``."""
    return logger.getChild(name)
