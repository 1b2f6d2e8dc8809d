"""Console and rotating JSON file logging for the API."""

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path

from config import Settings

LOGGER_NAMESPACE = "expense_insight"


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    _STANDARD_ATTRS = {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        # fields passed through logger.info(..., extra={...})
        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str)


def setup_logging(config: Settings) -> logging.Logger:
    """Attach console (and optionally file) handlers to the app logger.

    Args:
        config: settings providing LOG_LEVEL, LOG_DIR and APP_ENV

    Returns:
        The configured ``expense_insight`` logger
    """
    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    root_logger.setLevel(config.LOG_LEVEL)
    root_logger.handlers.clear()

    if config.is_production:
        console_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    else:
        console_format = (
            "[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"
        )
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        logging.Formatter(fmt=console_format, datefmt="%Y-%m-%d %H:%M:%S")
    )
    root_logger.addHandler(console_handler)

    if config.LOG_DIR:
        logs_dir = Path(config.LOG_DIR).expanduser()
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=logs_dir / "expense_insight.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    root_logger.info(
        "Logging initialized",
        extra={"app_env": config.APP_ENV, "log_dir": config.LOG_DIR},
    )
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the app logger, e.g. ``expense_insight.auth``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
